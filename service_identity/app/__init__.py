"""
Identity service application package.

This package exposes the FastAPI application that verifies identity tokens
issued by the Google Secure Token service (Firebase Authentication) and
returns the caller's normalized identity.

- app.main: Application entrypoint that wires routes and lifecycle.
- app.keys: Cache of the provider's published signing keys.
- app.validation: Production and emulator token verifiers.
- app.handlers: Bearer token extraction for the identity endpoint.
- app.pages: HTML pages hosting the client-side sign-in flow.

Design notes:
- Package import must not perform network calls; the signing keys are
  fetched lazily on the first verification.
- Use the shared/ utilities for logging, metrics, config and errors.
- No credential store: every request is verified from its bearer token.
"""
