"""
Identity service for the Identity Access layer.
"""

import sys
from typing import Optional

from fastapi import FastAPI, Header
from fastapi.responses import HTMLResponse
from pydantic import ValidationError

from shared.base_service import BaseService
from shared.config import ServiceConfig, get_config, missing_settings
from shared.logging import configure_logging, get_logger

from .handlers import IdentityHandler
from .keys import PublicKeyCache
from .pages import render_home_page, render_profile_page
from .validation import NormalizedIdentity, build_verifier


class IdentityService(BaseService):
    """Identity service implementation."""

    def __init__(self, config: Optional[ServiceConfig] = None, key_cache: Optional[PublicKeyCache] = None):
        super().__init__("identity", config)

        self.key_cache = key_cache or PublicKeyCache(
            self.config.google_certs_url,
            http_timeout=self.config.certs_http_timeout,
            metrics=self.metrics,
        )
        self.verifier = build_verifier(self.config, self.key_cache)
        self.identity_handler = IdentityHandler(
            self.verifier,
            self.config.expected_audience,
            metrics=self.metrics,
        )

        self._home_html = render_home_page(self.config)
        self._profile_html = render_profile_page(self.config)

        self._setup_identity_routes()

    def _setup_identity_routes(self):
        """Set up identity-specific routes."""

        @self.app.get("/", response_class=HTMLResponse)
        async def home():
            """Home page with the sign-in flow."""
            return HTMLResponse(self._home_html)

        @self.app.get("/profile", response_class=HTMLResponse)
        async def profile():
            """Profile page; loads the identity from /api/me."""
            return HTMLResponse(self._profile_html)

        @self.app.get("/api/me", response_model=NormalizedIdentity)
        async def current_identity(authorization: Optional[str] = Header(default=None)):
            """Return the identity carried by the caller's bearer token."""
            return await self.identity_handler.authenticate(authorization)

    async def _check_dependencies(self):
        """Report signing key state without touching the network."""
        dependencies = {"verification_mode": self.verifier.mode}
        if self.verifier.mode == "production":
            dependencies["signing_keys"] = "stale" if self.key_cache.is_expired() else "fresh"
        return dependencies

    async def _shutdown(self) -> None:
        await self.key_cache.aclose()


def create_app(config: Optional[ServiceConfig] = None, key_cache: Optional[PublicKeyCache] = None) -> FastAPI:
    """Create FastAPI application."""
    service = IdentityService(config, key_cache)
    return service.app


def main():
    """Entrypoint: refuse to start without the required configuration."""
    configure_logging("identity")
    logger = get_logger("identity.main")

    try:
        config = get_config()
    except ValidationError as exc:
        logger.error(
            "Missing or invalid required environment variables",
            vars=", ".join(missing_settings(exc)),
        )
        sys.exit(1)

    IdentityService(config).run()


if __name__ == "__main__":
    main()
