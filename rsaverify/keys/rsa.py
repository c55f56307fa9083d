# keys/rsa.py
"""RSA public key verifier (PKCS#1 v1.5 signatures over SHA-256)."""
import enum
from typing import NamedTuple

from pydantic import ValidationError

from rsaverify.common.errors import (
    AlreadyInitializedError,
    IdentifierDegradedError,
    InvalidRecordError,
    KeyVerifierError,
    NotInitializedError,
)
from rsaverify.common.protocol import KeyRecord, RSAKeyValue
from rsaverify.crypto.pki import parse_public_key, public_key_fingerprint_sha256, spki_der
from rsaverify.crypto.sign import rsa_verify

KEY_TYPE_RSASSA_PSS_SHA256 = "rsassa-pss-sha256"

class VerifierState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    FAILED = "failed"

class PublicIdentifier(NamedTuple):
    value: bytes
    # False when value is the raw PEM fallback, which differs per encoding
    canonical: bool

class RSAVerifier:
    """Verifier for one RSA public key.

    Built empty, populated once by ``unmarshal_key`` and read-only from then
    on, so a ready instance can be shared between threads. A failed
    ``unmarshal_key`` leaves the instance unusable.
    """

    def __init__(self):
        self._state = VerifierState.UNINITIALIZED
        self._public_pem = None
        self._key = None
        self._record = None

    @property
    def state(self) -> VerifierState:
        return self._state

    def _require_ready(self):
        if self._state is not VerifierState.READY:
            raise NotInitializedError(f"verifier is {self._state.value}")

    def unmarshal_key(self, record: KeyRecord):
        if self._state is not VerifierState.UNINITIALIZED:
            raise AlreadyInitializedError(f"verifier is {self._state.value}")
        try:
            value = RSAKeyValue.model_validate_json(record.value)
        except ValidationError as e:
            self._state = VerifierState.FAILED
            raise InvalidRecordError("key value must be an object with a string 'public' field") from e
        public_pem = value.public.encode()
        try:
            key = parse_public_key(public_pem)
        except KeyVerifierError:
            self._state = VerifierState.FAILED
            raise
        self._public_pem = public_pem
        self._key = key
        self._record = record
        self._state = VerifierState.READY

    def marshal_key(self) -> KeyRecord:
        self._require_ready()
        return self._record

    def public_identifier(self) -> PublicIdentifier:
        self._require_ready()
        try:
            return PublicIdentifier(spki_der(self._key), True)
        except (ValueError, TypeError):
            return PublicIdentifier(self._public_pem, False)

    def public(self, strict=False) -> bytes:
        """Encoding independent key identifier (SubjectPublicKeyInfo DER).

        With ``strict`` a key that cannot be re-encoded raises
        IdentifierDegradedError instead of returning the raw PEM bytes.
        """
        ident = self.public_identifier()
        if strict and not ident.canonical:
            raise IdentifierDegradedError("key could not be re-encoded as SubjectPublicKeyInfo")
        return ident.value

    def fingerprint(self) -> str:
        return public_key_fingerprint_sha256(self.public())

    def verify(self, msg: bytes, sig: bytes):
        self._require_ready()
        rsa_verify(self._key, msg, sig)

def new_rsa_verifier() -> RSAVerifier:
    return RSAVerifier()

def register(registry):
    registry.register(KEY_TYPE_RSASSA_PSS_SHA256, new_rsa_verifier)
