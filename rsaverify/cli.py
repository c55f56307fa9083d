# cli.py
"""Console tool: show key identifiers and check detached signatures."""
import argparse
import binascii
import logging
import os
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from rsaverify import config
from rsaverify.common.errors import InvalidSignatureError, KeyVerifierError
from rsaverify.common.protocol import KeyRecord
from rsaverify.common.utils import ub64
from rsaverify.keys.registry import VerifierRegistry, install_default_verifiers

console = Console()
logger = logging.getLogger("rsaverify")

EXIT_OK = 0
EXIT_BAD_SIGNATURE = 1
EXIT_ERROR = 2

def resolve_key_path(name: str) -> Path:
    p = Path(name)
    if p.exists() or p.is_absolute():
        return p
    return config.KEYS_DIR / p

def load_record(name: str) -> KeyRecord:
    path = resolve_key_path(name)
    logger.debug("loading key record from %s", path)
    return KeyRecord.from_json(path.read_bytes())

def decode_signature(arg: str, encoding: str) -> bytes:
    if os.path.isfile(arg):
        raw = Path(arg).read_bytes()
        if encoding == "raw":
            return raw
        text = raw.decode().strip()
    else:
        if encoding == "raw":
            raise ValueError("raw signatures must be given as a file")
        text = arg.strip()
    if encoding == "hex":
        return bytes.fromhex(text)
    return ub64(text, validate=True)

def cmd_identifier(args, registry) -> int:
    record = load_record(args.key)
    verifier = registry.load(record)
    ident = verifier.public_identifier()
    if config.STRICT_IDENTIFIER and not ident.canonical:
        console.print("[red]identifier is degraded (raw PEM fallback)[/]")
        return EXIT_ERROR
    for keyid in record.key_ids():
        console.print(f"keyid: [bold]{keyid}[/]")
    console.print(f"fingerprint: {verifier.fingerprint()}")
    console.print(f"canonical: {'yes' if ident.canonical else 'no'}")
    return EXIT_OK

def cmd_verify(args, registry) -> int:
    record = load_record(args.key)
    verifier = registry.load(record)
    try:
        sig = decode_signature(args.signature, args.encoding)
    except (ValueError, binascii.Error):
        console.print(f"[red]could not decode signature as {args.encoding}[/]")
        return EXIT_ERROR
    msg = Path(args.message).read_bytes()
    try:
        verifier.verify(msg, sig)
    except InvalidSignatureError:
        console.print("[red]signature INVALID[/]")
        return EXIT_BAD_SIGNATURE
    console.print("[green]signature valid[/]")
    return EXIT_OK

def build_parser():
    p = argparse.ArgumentParser(prog="rsaverify")
    p.add_argument("-v", "--verbose", action="store_true")
    sub = p.add_subparsers(dest="command", required=True)

    ident = sub.add_parser("identifier", help="print key ids and identifier fingerprint")
    ident.add_argument("key", help="key record JSON file (or name under RSAVERIFY_KEYS_DIR)")
    ident.set_defaults(func=cmd_identifier)

    ver = sub.add_parser("verify", help="verify a detached signature")
    ver.add_argument("key")
    ver.add_argument("message", help="file holding the signed bytes")
    ver.add_argument("signature", help="signature file or inline encoded signature")
    ver.add_argument("--encoding", choices=["hex", "base64", "raw"], default="hex")
    ver.set_defaults(func=cmd_verify)
    return p

def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level="DEBUG" if args.verbose else config.LOG_LEVEL,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True))],
    )
    registry = install_default_verifiers(VerifierRegistry())
    try:
        return args.func(args, registry)
    except OSError as e:
        console.print(f"[red]{escape(str(e))}[/]")
        return EXIT_ERROR
    except KeyVerifierError as e:
        console.print(f"[red]{type(e).__name__}: {escape(str(e))}[/]")
        return EXIT_ERROR

if __name__ == "__main__":
    raise SystemExit(main())
