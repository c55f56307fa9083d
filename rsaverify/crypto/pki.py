# crypto/pki.py
"""Public key decoding helpers (PEM armor, PKCS#1 and SubjectPublicKeyInfo DER)."""
import binascii
import re

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from rsaverify.common.errors import MalformedKeyError, UnsupportedKeyTypeError
from rsaverify.common.utils import b64, sha256_hex, ub64

PEM_BLOCK = re.compile(
    rb"-----BEGIN ([A-Z0-9 ]+)-----\r?\n(.*?)-----END \1-----", re.DOTALL
)

def decode_pem(data: bytes) -> (str, bytes):
    """Return (label, der) of the first PEM block in data."""
    m = PEM_BLOCK.search(data)
    if m is None:
        raise MalformedKeyError("no PEM block found")
    body = b"".join(m.group(2).split())
    try:
        der = ub64(body, validate=True)
    except binascii.Error as e:
        raise MalformedKeyError("bad base64 in PEM block") from e
    if not der:
        raise MalformedKeyError("empty PEM block")
    return m.group(1).decode(), der

def armor(label: str, der: bytes) -> bytes:
    body = b64(der)
    lines = [body[i:i + 64] for i in range(0, len(body), 64)]
    return ("-----BEGIN %s-----\n%s\n-----END %s-----\n" % (label, "\n".join(lines), label)).encode()

def parse_pkcs1_public_key(der: bytes) -> rsa.RSAPublicKey:
    # the RSA PUBLIC KEY label makes the loader accept only a bare modulus/exponent pair
    return serialization.load_pem_public_key(armor("RSA PUBLIC KEY", der))

def parse_pkix_public_key(der: bytes):
    return serialization.load_der_public_key(der)

def parse_public_key(data: bytes) -> rsa.RSAPublicKey:
    """Parse one PEM block as PKCS#1, falling back to SubjectPublicKeyInfo.

    The PEM label is ignored; producers in the wild put either encoding
    under either label.
    """
    _, der = decode_pem(data)
    try:
        return parse_pkcs1_public_key(der)
    except ValueError:
        pass
    try:
        key = parse_pkix_public_key(der)
    except UnsupportedAlgorithm as e:
        raise UnsupportedKeyTypeError("unsupported public key algorithm") from e
    except ValueError as e:
        raise MalformedKeyError("key is neither PKCS#1 nor SubjectPublicKeyInfo") from e
    if not isinstance(key, rsa.RSAPublicKey):
        raise UnsupportedKeyTypeError(f"not an RSA key: {type(key).__name__}")
    return key

def spki_der(key) -> bytes:
    return key.public_bytes(
        serialization.Encoding.DER, serialization.PublicFormat.SubjectPublicKeyInfo
    )

def public_key_fingerprint_sha256(identifier: bytes) -> str:
    return sha256_hex(identifier)
