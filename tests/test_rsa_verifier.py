import json

import pytest

from conftest import make_record
from rsaverify.common.errors import (
    AlreadyInitializedError,
    IdentifierDegradedError,
    InvalidRecordError,
    InvalidSignatureError,
    MalformedKeyError,
    NotInitializedError,
    UnsupportedKeyTypeError,
)
from rsaverify.common.protocol import KeyRecord
from rsaverify.keys import rsa as rsa_keys
from rsaverify.keys.rsa import RSAVerifier, VerifierState


def ready(record):
    v = RSAVerifier()
    v.unmarshal_key(record)
    return v


def test_round_trip_returns_same_record(record):
    v = ready(record)
    assert v.state is VerifierState.READY
    assert v.marshal_key() is record


def test_encoding_independent_identifier(pkcs1_pem, spki_pem):
    a = ready(make_record(pkcs1_pem))
    b = ready(make_record(spki_pem))
    assert a.public() == b.public()
    assert a.fingerprint() == b.fingerprint()
    assert a.public_identifier().canonical


def test_different_keys_different_identifiers(spki_pem, other_rsa_private_key):
    from cryptography.hazmat.primitives import serialization

    other = other_rsa_private_key.public_key().public_bytes(
        serialization.Encoding.PEM, serialization.PublicFormat.SubjectPublicKeyInfo
    )
    assert ready(make_record(spki_pem)).public() != ready(make_record(other)).public()


def test_verify_valid_signature(record, sign):
    msg = b"targets.json contents"
    ready(record).verify(msg, sign(msg))


def test_verify_rejects_other_message(record, sign):
    v = ready(record)
    sig = sign(b"original")
    with pytest.raises(InvalidSignatureError):
        v.verify(b"original!", sig)


def test_verify_rejects_bit_flip(record, sign):
    v = ready(record)
    sig = bytearray(sign(b"payload"))
    sig[10] ^= 0x01
    with pytest.raises(InvalidSignatureError):
        v.verify(b"payload", bytes(sig))


def test_verify_rejects_wrong_key(record, sign, other_rsa_private_key):
    with pytest.raises(InvalidSignatureError):
        ready(record).verify(b"payload", sign(b"payload", other_rsa_private_key))


def test_invalid_signature_is_uniform(record, sign):
    v = ready(record)
    errors = []
    for msg, sig in [(b"x", sign(b"y")), (b"x", b"short"), (b"x", b"")]:
        with pytest.raises(InvalidSignatureError) as exc:
            v.verify(msg, sig)
        errors.append(exc.value)
    assert len({str(e) for e in errors}) == 1
    assert all(e.__cause__ is None for e in errors)
    assert all(e.__suppress_context__ for e in errors)


def test_reads_are_repeatable(record, sign):
    v = ready(record)
    sig = sign(b"m")
    assert v.public() == v.public()
    for _ in range(3):
        v.verify(b"m", sig)
    for _ in range(3):
        with pytest.raises(InvalidSignatureError):
            v.verify(b"n", sig)


@pytest.mark.parametrize("value", [b"{not json", b"[]", b'{"private": "x"}', b'{"public": 42}'])
def test_invalid_record(value):
    v = RSAVerifier()
    with pytest.raises(InvalidRecordError):
        v.unmarshal_key(KeyRecord(keytype="rsassa-pss-sha256", scheme="rsassa-pss-sha256", value=value))
    assert v.state is VerifierState.FAILED


def test_malformed_pem():
    v = RSAVerifier()
    with pytest.raises(MalformedKeyError):
        v.unmarshal_key(make_record("not a pem"))
    assert v.state is VerifierState.FAILED


def test_non_rsa_key(ec_pem):
    v = RSAVerifier()
    with pytest.raises(UnsupportedKeyTypeError):
        v.unmarshal_key(make_record(ec_pem))
    with pytest.raises(NotInitializedError):
        v.verify(b"m", b"s")


def test_uninitialized_use():
    v = RSAVerifier()
    assert v.state is VerifierState.UNINITIALIZED
    with pytest.raises(NotInitializedError):
        v.verify(b"m", b"s")
    with pytest.raises(NotInitializedError):
        v.public()
    with pytest.raises(NotInitializedError):
        v.marshal_key()


def test_unmarshal_only_once(record):
    v = ready(record)
    with pytest.raises(AlreadyInitializedError):
        v.unmarshal_key(record)
    assert v.marshal_key() is record


def test_identifier_fallback_is_tagged(record, monkeypatch, spki_pem):
    v = ready(record)

    def broken(key):
        raise ValueError("cannot encode")

    monkeypatch.setattr(rsa_keys, "spki_der", broken)
    ident = v.public_identifier()
    assert not ident.canonical
    assert ident.value == json.loads(record.value)["public"].encode()
    assert v.public() == ident.value
    with pytest.raises(IdentifierDegradedError):
        v.public(strict=True)
