import json

import pytest
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa

from rsaverify.common.protocol import KeyRecord
from rsaverify.keys.rsa import KEY_TYPE_RSASSA_PSS_SHA256


@pytest.fixture(scope="session")
def rsa_private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def other_rsa_private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def pkcs1_pem(rsa_private_key):
    return rsa_private_key.public_key().public_bytes(
        serialization.Encoding.PEM, serialization.PublicFormat.PKCS1
    )


@pytest.fixture(scope="session")
def spki_pem(rsa_private_key):
    return rsa_private_key.public_key().public_bytes(
        serialization.Encoding.PEM, serialization.PublicFormat.SubjectPublicKeyInfo
    )


@pytest.fixture(scope="session")
def ec_pem():
    key = ec.generate_private_key(ec.SECP256R1())
    return key.public_key().public_bytes(
        serialization.Encoding.PEM, serialization.PublicFormat.SubjectPublicKeyInfo
    )


def make_record(public, **kw):
    if isinstance(public, bytes):
        public = public.decode()
    return KeyRecord(
        keytype=kw.get("keytype", KEY_TYPE_RSASSA_PSS_SHA256),
        scheme=kw.get("scheme", KEY_TYPE_RSASSA_PSS_SHA256),
        keyid_hash_algorithms=kw.get("keyid_hash_algorithms"),
        value=json.dumps({"public": public}).encode(),
    )


@pytest.fixture
def record(spki_pem):
    return make_record(spki_pem)


@pytest.fixture
def sign(rsa_private_key):
    def _sign(msg, key=None):
        key = key or rsa_private_key
        return key.sign(msg, padding.PKCS1v15(), hashes.SHA256())
    return _sign
