"""
Request handlers for the identity endpoint.
"""

from .identity import IdentityHandler, extract_bearer_token

__all__ = [
    "IdentityHandler",
    "extract_bearer_token",
]
