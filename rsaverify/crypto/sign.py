# crypto/sign.py
"""RSA PKCS#1 v1.5 / SHA-256 signature verification using cryptography."""
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding

from rsaverify.common.errors import InvalidSignatureError

def rsa_verify(public_key, data: bytes, sig: bytes):
    """Raise InvalidSignatureError unless sig is a PKCS1v15 SHA-256 signature of data."""
    try:
        public_key.verify(sig, data, padding.PKCS1v15(), hashes.SHA256())
    except (InvalidSignature, ValueError):
        # no cause chained: padding, length and digest failures look the same
        raise InvalidSignatureError() from None
