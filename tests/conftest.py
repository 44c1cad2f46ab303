import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa


def _generate():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def rsa_key():
    return _generate()


@pytest.fixture(scope="session")
def other_rsa_key():
    return _generate()


@pytest.fixture(scope="session")
def private_pem(rsa_key):
    """PKCS#8 PEM, as written by most tooling."""
    return rsa_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode()


@pytest.fixture(scope="session")
def rsa_private_pem(rsa_key):
    """Legacy PKCS#1 ``RSA PRIVATE KEY`` PEM."""
    return rsa_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.TraditionalOpenSSL,
        serialization.NoEncryption(),
    ).decode()


@pytest.fixture(scope="session")
def public_pem(rsa_key):
    return rsa_key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()


@pytest.fixture(scope="session")
def other_public_pem(other_rsa_key):
    return other_rsa_key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()


@pytest.fixture
def key_file(tmp_path, private_pem):
    path = tmp_path / "private.pem"
    path.write_text(private_pem)
    return path
