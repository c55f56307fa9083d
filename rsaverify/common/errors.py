# common/errors.py
"""Typed failures raised by the key verifiers and the registry."""


class KeyVerifierError(Exception):
    pass

class InvalidRecordError(KeyVerifierError):
    """Key record envelope or value did not decode into the expected shape."""

class MalformedKeyError(KeyVerifierError):
    """PEM armor or DER body could not be decoded."""

class UnsupportedKeyTypeError(KeyVerifierError):
    """Key decoded fine but is not an RSA key."""

class InvalidSignatureError(KeyVerifierError):
    # one message for every failure, callers must not learn why
    def __init__(self):
        super().__init__("signature verification failed")

class NotInitializedError(KeyVerifierError):
    """Verifier used before a successful unmarshal_key."""

class AlreadyInitializedError(KeyVerifierError):
    """unmarshal_key called a second time on the same verifier."""

class IdentifierDegradedError(KeyVerifierError):
    """Key could not be re-encoded as SubjectPublicKeyInfo."""

class UnsupportedSchemeError(KeyVerifierError, KeyError):
    def __init__(self, scheme):
        super().__init__(scheme)
        self.scheme = scheme

    def __str__(self):
        return f"no verifier registered for scheme {self.scheme!r}"
