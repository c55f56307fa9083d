# common/protocol.py
"""Key record models (wire shape of public keys in signed metadata)."""
import json
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from rsaverify.common.errors import InvalidRecordError
from rsaverify.common.utils import canonical_json, json_dumps, sha256_hex, sha512_hex

KEYID_HASHERS = {
    "sha256": sha256_hex,
    "sha512": sha512_hex,
}

class KeyRecord(BaseModel):
    """Public key record. ``value`` holds the JSON encoded key material.

    Records are frozen: verifiers keep a reference to the instance they were
    built from and hand that same instance back from ``marshal_key``.
    """
    model_config = ConfigDict(frozen=True)

    keytype: str
    scheme: str
    keyid_hash_algorithms: Optional[List[str]] = None
    value: bytes

    @field_validator("value", mode="before")
    @classmethod
    def _encode_value(cls, v):
        # on the wire value is an object, in memory it is the raw JSON bytes
        if isinstance(v, dict):
            return json_dumps(v).encode()
        if isinstance(v, str):
            return v.encode()
        return v

    @classmethod
    def from_dict(cls, obj):
        try:
            return cls.model_validate(obj)
        except ValidationError as e:
            raise InvalidRecordError(f"invalid key record: {e.error_count()} error(s)") from e

    @classmethod
    def from_json(cls, raw):
        try:
            return cls.model_validate_json(raw)
        except ValidationError as e:
            raise InvalidRecordError(f"invalid key record: {e.error_count()} error(s)") from e

    def value_object(self) -> dict:
        try:
            obj = json.loads(self.value)
        except ValueError as e:
            raise InvalidRecordError("key value is not valid JSON") from e
        if not isinstance(obj, dict):
            raise InvalidRecordError("key value is not a JSON object")
        return obj

    def to_dict(self) -> dict:
        d = {"keytype": self.keytype, "scheme": self.scheme, "value": self.value_object()}
        if self.keyid_hash_algorithms is not None:
            d["keyid_hash_algorithms"] = list(self.keyid_hash_algorithms)
        return d

    def key_ids(self) -> List[str]:
        """Hex key ids, one per entry of ``keyid_hash_algorithms`` (sha256 if unset)."""
        data = canonical_json(self.to_dict())
        ids = []
        for alg in self.keyid_hash_algorithms or ["sha256"]:
            hasher = KEYID_HASHERS.get(alg)
            if hasher is None:
                raise InvalidRecordError(f"unknown keyid hash algorithm {alg!r}")
            ids.append(hasher(data))
        return ids

class RSAKeyValue(BaseModel):
    public: str  # PEM armored PKCS#1 or SubjectPublicKeyInfo DER
