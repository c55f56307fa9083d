# keys/registry.py
"""Scheme id -> verifier factory lookup.

Writes happen once during program start-up (``install_default_verifiers``),
before any concurrent lookups. The registry does not lock: it relies on that
single-writer-then-readers discipline.
"""
import logging
from typing import Callable, Dict, Protocol

from rsaverify.common.errors import UnsupportedSchemeError
from rsaverify.common.protocol import KeyRecord

logger = logging.getLogger(__name__)

class Verifier(Protocol):
    def public(self) -> bytes: ...

    def verify(self, msg: bytes, sig: bytes) -> None: ...

    def marshal_key(self) -> KeyRecord: ...

    def unmarshal_key(self, record: KeyRecord) -> None: ...

class VerifierRegistry:
    def __init__(self):
        self._factories: Dict[str, Callable[[], Verifier]] = {}

    def register(self, scheme: str, factory: Callable[[], Verifier]):
        # last writer wins
        if scheme in self._factories:
            logger.warning("replacing verifier factory for scheme %s", scheme)
        else:
            logger.debug("registered verifier factory for scheme %s", scheme)
        self._factories[scheme] = factory

    def factory(self, scheme: str) -> Callable[[], Verifier]:
        try:
            return self._factories[scheme]
        except KeyError:
            raise UnsupportedSchemeError(scheme) from None

    def schemes(self):
        return sorted(self._factories)

    def __contains__(self, scheme):
        return scheme in self._factories

    def load(self, record: KeyRecord) -> Verifier:
        """Build a verifier for record and populate it from the record."""
        verifier = self.factory(record.keytype)()
        verifier.unmarshal_key(record)
        return verifier

default_registry = VerifierRegistry()

def install_default_verifiers(registry=None):
    from rsaverify.keys import rsa

    registry = default_registry if registry is None else registry
    rsa.register(registry)
    return registry
