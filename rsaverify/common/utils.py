# common/utils.py
import base64, json
from hashlib import sha256, sha512

def b64(b: bytes) -> str:
    return base64.b64encode(b).decode()

def ub64(s, validate=False) -> bytes:
    return base64.b64decode(s, validate=validate)

def sha256_hex(b: bytes) -> str:
    return sha256(b).hexdigest()

def sha512_hex(b: bytes) -> str:
    return sha512(b).hexdigest()

def json_dumps(obj):
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False)

def _canonical_str(s: str) -> str:
    # OLPC canonical form: only backslash and quote are escaped
    return '"' + s.replace("\\", "\\\\").replace('"', '\\"') + '"'

def _canonical(obj) -> str:
    if obj is None:
        return "null"
    if obj is True:
        return "true"
    if obj is False:
        return "false"
    if isinstance(obj, int):
        return str(obj)
    if isinstance(obj, str):
        return _canonical_str(obj)
    if isinstance(obj, (list, tuple)):
        return "[" + ",".join(_canonical(v) for v in obj) + "]"
    if isinstance(obj, dict):
        items = sorted(obj.items())
        return "{" + ",".join(_canonical_str(k) + ":" + _canonical(v) for k, v in items) + "}"
    # floats have no canonical form
    raise TypeError(f"cannot canonicalize {type(obj).__name__}")

def canonical_json(obj) -> bytes:
    """OLPC canonical JSON, the encoding TUF key ids are hashed over."""
    return _canonical(obj).encode()
