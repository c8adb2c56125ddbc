"""
Verifier selection.
"""

from shared.config import ServiceConfig
from shared.logging import get_logger

from ..keys import PublicKeyCache
from .base import TokenVerifier
from .emulator import EmulatorTokenVerifier
from .token_verifier import ProductionTokenVerifier

logger = get_logger("identity.verifier")


def build_verifier(config: ServiceConfig, key_cache: PublicKeyCache) -> TokenVerifier:
    """Pick the verifier for the lifetime of the process.

    Emulator mode is decided here, from configuration, and nowhere else.
    """
    if config.emulator_enabled:
        logger.warning(
            "Running with Auth emulator; token signatures are NOT verified",
            host=config.firebase_auth_emulator_host,
        )
        return EmulatorTokenVerifier(config.firebase_auth_emulator_host.strip())

    return ProductionTokenVerifier(key_cache, clock_skew_seconds=config.token_clock_skew_seconds)
