"""
Shared fixtures for Identity service tests.
"""

import pytest

from shared.test_helpers import (
    FakeCertsEndpoint,
    FakeClock,
    TEST_PROJECT_ID,
    create_certificate_pem,
    create_test_config,
    generate_rsa_key,
)
from service_identity.app.keys import PublicKeyCache


@pytest.fixture(scope="session")
def signing_key():
    """RSA key whose certificate the fake endpoint publishes."""
    return generate_rsa_key()


@pytest.fixture(scope="session")
def other_key():
    """RSA key the provider never published."""
    return generate_rsa_key()


@pytest.fixture(scope="session")
def signing_cert(signing_key):
    return create_certificate_pem(signing_key)


@pytest.fixture
def project_id():
    return TEST_PROJECT_ID


@pytest.fixture
def certs_endpoint(signing_cert):
    return FakeCertsEndpoint({"key-valid": signing_cert})


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def key_cache(certs_endpoint, clock):
    return PublicKeyCache(
        "https://certs.test/x509",
        http_client=certs_endpoint.client(),
        clock=clock,
    )


@pytest.fixture
def test_config():
    return create_test_config()
