"""
kpow-secure command line.

Usage:
    kpow-secure encrypt --key-file passphrase.key --file config.env --out-file config.env.aes
    kpow-secure decrypt --key-file passphrase.key --file config.env.aes
    kpow-secure keygen --pass-file passphrase.txt --out-file passphrase.key

Or run directly:
    python -m kpow_secure

When no key option is given the key is taken from KPOW_SECURE_KEY or
KPOW_SECURE_KEY_FILE (environment or .env file). Results are written to
--out-file when given, otherwise to the log.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from .config import Settings, parse_log_level
from .errors import ConfigError, SecureError
from .key import SecretKey, derive_key, export_key, import_key, random_salt
from .payload import decoded_payload, encoded_payload, read_text

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kpow-secure",
        description="Encrypt and decrypt configuration secrets with AES-256.",
    )
    parser.add_argument("--log-level", help="Logging level (default: INFO)")
    commands = parser.add_subparsers(dest="command", required=True)

    for name, verb in (("encrypt", "Encrypt plain text"), ("decrypt", "Decrypt a payload")):
        sub = commands.add_parser(name, help=verb)
        key_source = sub.add_mutually_exclusive_group()
        key_source.add_argument("--key", help="Base64 encryption key")
        key_source.add_argument("--key-file", help="File containing base64 encryption key")
        target = sub.add_mutually_exclusive_group(required=True)
        target.add_argument("--text", help="Literal input text")
        target.add_argument("--file", help="File containing the input text")
        sub.add_argument("--out-file", help="Write the result to this file")
        sub.set_defaults(handler=run_encrypt if name == "encrypt" else run_decrypt)

    keygen = commands.add_parser("keygen", help="Derive a key from a passphrase")
    passphrase = keygen.add_mutually_exclusive_group(required=True)
    passphrase.add_argument("--passphrase", help="Literal passphrase")
    passphrase.add_argument("--pass-file", help="File containing the passphrase")
    keygen.add_argument("--salt", help="Salt text (random when omitted)")
    keygen.add_argument("--out-file", help="Write the base64 key to this file")
    keygen.set_defaults(handler=run_keygen)

    return parser


def resolve_key(args: argparse.Namespace, settings: Settings) -> SecretKey:
    """Key from --key / --key-file, falling back to the environment."""
    if args.key is not None:
        return import_key(args.key)
    if args.key_file is not None:
        return import_key(read_text(args.key_file).strip())
    return settings.secret_key()


def emit(result: str, out_file: Optional[str], description: str) -> None:
    if not out_file:
        logger.info("%s:\n\n%s\n", description, result)
        return
    try:
        Path(out_file).write_text(result, encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to write {out_file}: {e}") from e
    logger.info("%s > %s", description, out_file)


def run_encrypt(args: argparse.Namespace, settings: Settings) -> None:
    key = resolve_key(args, settings)
    text = args.text if args.text is not None else read_text(args.file)
    emit(encoded_payload(key, text), args.out_file, "Plain text encrypted")


def run_decrypt(args: argparse.Namespace, settings: Settings) -> None:
    key = resolve_key(args, settings)
    payload = args.text if args.text is not None else read_text(args.file)
    emit(decoded_payload(key, payload.strip()), args.out_file, "Payload decrypted")


def run_keygen(args: argparse.Namespace, settings: Settings) -> None:
    if args.passphrase is not None:
        passphrase = args.passphrase
    else:
        passphrase = read_text(args.pass_file).strip()
    salt = args.salt
    if salt is None:
        salt = random_salt()
        logger.info("Generated random salt: %s", salt)
    emit(export_key(derive_key(passphrase, salt)), args.out_file, "Key generated")


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point for the kpow-secure command. Returns the exit status."""
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.from_env()
        log_level = settings.log_level
        if args.log_level is not None:
            log_level = parse_log_level(args.log_level, "--log-level")
    except ConfigError as e:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        logger.error("Invalid configuration: %s", e)
        return 1

    logging.basicConfig(level=log_level, format=LOG_FORMAT)
    logger.debug("Running %s with %r", args.command, settings)

    try:
        args.handler(args, settings)
    except SecureError as e:
        logger.error("Failed to %s [%s]: %s", args.command, e.kind, e)
        return 1
    return 0
