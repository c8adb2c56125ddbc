"""
Unit tests for the emulator verifier and verifier selection.
"""

import time

import pytest

from shared.test_helpers import (
    create_firebase_claims,
    create_id_token,
    create_test_config,
    create_unsigned_token,
)
from service_identity.app.validation import (
    EmulatorTokenVerifier,
    ProductionTokenVerifier,
    VerificationError,
    VerificationErrorKind,
    build_verifier,
)


@pytest.fixture
def emulator_verifier():
    return EmulatorTokenVerifier("localhost:9099")


class TestEmulatorTokenVerifier:
    """Test cases for EmulatorTokenVerifier."""

    @pytest.mark.asyncio
    async def test_unsigned_token(self, emulator_verifier, project_id):
        token = create_unsigned_token(create_firebase_claims(project_id))

        identity = await emulator_verifier.verify(token, project_id)

        assert identity.uid == "user-uid-abc123"
        assert identity.email == "jane@example.com"
        assert identity.name == "Jane Doe"

    @pytest.mark.asyncio
    async def test_unsigned_token_rejected_by_production_verifier(self, emulator_verifier, key_cache, project_id):
        token = create_unsigned_token(create_firebase_claims(project_id))

        identity = await emulator_verifier.verify(token, project_id)
        assert identity.uid == "user-uid-abc123"

        with pytest.raises(VerificationError) as exc_info:
            await ProductionTokenVerifier(key_cache).verify(token, project_id)
        assert exc_info.value.kind is VerificationErrorKind.UNSUPPORTED_ALGORITHM

    @pytest.mark.asyncio
    async def test_signature_is_not_checked(self, emulator_verifier, other_key, project_id):
        token = create_id_token(other_key, "whatever", create_firebase_claims(project_id))

        identity = await emulator_verifier.verify(token, project_id)

        assert identity.uid == "user-uid-abc123"

    @pytest.mark.asyncio
    async def test_issuer_audience_and_expiry_are_not_checked(self, emulator_verifier, project_id):
        now = int(time.time())
        claims = create_firebase_claims(
            project_id,
            iss="http://localhost:9099/other",
            aud="other-project",
            exp=now - 3600,
        )
        del claims["picture"]

        identity = await emulator_verifier.verify(create_unsigned_token(claims), project_id)

        assert identity.uid == "user-uid-abc123"
        assert identity.picture == ""

    @pytest.mark.asyncio
    async def test_empty_subject(self, emulator_verifier, project_id):
        token = create_unsigned_token(create_firebase_claims(project_id, sub=""))

        with pytest.raises(VerificationError) as exc_info:
            await emulator_verifier.verify(token, project_id)

        assert exc_info.value.kind is VerificationErrorKind.MISSING_SUBJECT

    @pytest.mark.asyncio
    async def test_missing_subject(self, emulator_verifier, project_id):
        claims = create_firebase_claims(project_id)
        del claims["sub"]

        with pytest.raises(VerificationError) as exc_info:
            await emulator_verifier.verify(create_unsigned_token(claims), project_id)

        assert exc_info.value.kind is VerificationErrorKind.MISSING_SUBJECT

    @pytest.mark.asyncio
    async def test_other_algorithms_rejected(self, emulator_verifier, project_id):
        token = create_id_token("shared-secret", None, create_firebase_claims(project_id), algorithm="HS256")

        with pytest.raises(VerificationError) as exc_info:
            await emulator_verifier.verify(token, project_id)

        assert exc_info.value.kind is VerificationErrorKind.UNSUPPORTED_ALGORITHM

    @pytest.mark.asyncio
    @pytest.mark.parametrize("algorithm", [["none"], {}, None, 256])
    async def test_non_string_algorithm_rejected(self, emulator_verifier, project_id, algorithm):
        token = create_unsigned_token(create_firebase_claims(project_id), headers={"alg": algorithm})

        with pytest.raises(VerificationError) as exc_info:
            await emulator_verifier.verify(token, project_id)

        assert exc_info.value.kind is VerificationErrorKind.UNSUPPORTED_ALGORITHM

    @pytest.mark.asyncio
    async def test_malformed_token(self, emulator_verifier, project_id):
        with pytest.raises(VerificationError) as exc_info:
            await emulator_verifier.verify("not-a-token", project_id)

        assert exc_info.value.kind is VerificationErrorKind.MALFORMED_TOKEN


class TestBuildVerifier:
    """Test cases for verifier selection."""

    def test_production_without_emulator_host(self, key_cache):
        verifier = build_verifier(create_test_config(), key_cache)

        assert isinstance(verifier, ProductionTokenVerifier)
        assert verifier.key_cache is key_cache

    def test_blank_emulator_host_is_production(self, key_cache):
        verifier = build_verifier(create_test_config(firebase_auth_emulator_host="  "), key_cache)

        assert isinstance(verifier, ProductionTokenVerifier)

    def test_emulator_host_selects_emulator(self, key_cache):
        config = create_test_config(firebase_auth_emulator_host="firebase-emulator:9099")

        verifier = build_verifier(config, key_cache)

        assert isinstance(verifier, EmulatorTokenVerifier)
        assert verifier.emulator_host == "firebase-emulator:9099"

    def test_clock_skew_is_passed_through(self, key_cache):
        verifier = build_verifier(create_test_config(token_clock_skew_seconds=30), key_cache)

        assert verifier.clock_skew_seconds == 30
