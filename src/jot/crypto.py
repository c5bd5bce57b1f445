"""Transparent at-rest encryption using the age format.

Encryption is a property of the whole store, not of a note:

- ``config.toml`` holding ``recipient = "age1..."`` turns on encryption for
  every write.
- ``identity.txt`` holding the matching secret key turns on decryption for
  every read of a file that starts with the age header.

Files are sniffed one by one, so a store may hold a mix of plaintext and
ciphertext while it is being converted.  The envelope itself comes from
:mod:`pyrage`; nothing here implements cryptography.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

import pyrage
from loguru import logger
from pyrage import x25519

from jot.config import RECIPIENT_KEY
from jot.exc import ConfigurationError, CryptoError, UnreadableNote
from jot.paths import StorePaths

AGE_MAGIC = b"age-encryption.org"


# ---------------------------------------------------------------------------
# Payload classification
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PlainPayload:
    data: bytes


@dataclass(frozen=True)
class EncryptedPayload:
    data: bytes


Payload = PlainPayload | EncryptedPayload


def classify(raw: bytes) -> Payload:
    """Tag *raw* as ciphertext when it carries the age header."""
    if raw.startswith(AGE_MAGIC):
        return EncryptedPayload(raw)
    return PlainPayload(raw)


def _decode_text(data: bytes, path: Path) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise UnreadableNote(path, str(exc)) from exc


# ---------------------------------------------------------------------------
# Key material
# ---------------------------------------------------------------------------


def load_identity(path: Path) -> x25519.Identity:
    """Parse the secret key in *path*, skipping ``#`` comment lines."""
    lines = [
        line.strip()
        for line in path.read_text(encoding="utf-8").splitlines()
        if line.strip() and not line.strip().startswith("#")
    ]
    if not lines:
        raise CryptoError(f"Failed to parse identity file {path}: it is empty.")
    try:
        return x25519.Identity.from_str(lines[0])
    except pyrage.IdentityError as exc:
        raise CryptoError(f"Failed to parse identity file {path}: {exc}") from exc


def load_recipient(config_path: Path) -> x25519.Recipient | None:
    """Return the recipient named in ``config.toml``, or ``None``."""
    if not config_path.exists():
        return None
    try:
        with open(config_path, "rb") as fh:
            data = tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Failed to parse {config_path}: {exc}") from exc

    value = data.get(RECIPIENT_KEY)
    if not value:
        return None
    try:
        return x25519.Recipient.from_str(str(value).strip())
    except pyrage.RecipientError as exc:
        raise CryptoError(f"Failed to parse recipient from config: {exc}") from exc


def decrypt_bytes(data: bytes, identity: x25519.Identity, path: Path) -> bytes:
    try:
        return pyrage.decrypt(data, [identity])
    except pyrage.DecryptError as exc:
        raise CryptoError(f"Could not decrypt {path}: {exc}") from exc


# ---------------------------------------------------------------------------
# Gate
# ---------------------------------------------------------------------------


class EncryptionGate:
    """Encrypt-on-write / decrypt-on-read, driven by the store's key files.

    Key files are re-read on every call; no in-memory state outlives an
    operation.
    """

    def __init__(self, paths: StorePaths) -> None:
        self.paths = paths

    def recipient(self) -> x25519.Recipient | None:
        return load_recipient(self.paths.config_path())

    def identity(self) -> x25519.Identity | None:
        path = self.paths.identity_path()
        if not path.exists():
            return None
        return load_identity(path)

    def is_enabled(self) -> bool:
        return self.paths.identity_path().exists() and self.recipient() is not None

    def write(self, path: Path, text: str) -> None:
        """Write *text* to *path*, encrypted when a recipient is configured."""
        recipient = self.recipient()
        data = text.encode("utf-8")
        if recipient is not None:
            try:
                data = pyrage.encrypt(data, [recipient])
            except pyrage.EncryptError as exc:
                raise CryptoError(f"Could not encrypt {path}: {exc}") from exc
            logger.debug("Encrypted {}", path.name)
        path.write_bytes(data)

    def read(self, path: Path) -> str:
        """Return the text of *path*, decrypting it when possible."""
        payload = classify(path.read_bytes())
        if isinstance(payload, EncryptedPayload):
            identity = self.identity()
            if identity is None:
                raise CryptoError(
                    f"{path} is encrypted but no identity file was found at "
                    f"{self.paths.identity_path()}."
                )
            return _decode_text(decrypt_bytes(payload.data, identity, path), path)
        return _decode_text(payload.data, path)


# ---------------------------------------------------------------------------
# Setup / teardown
# ---------------------------------------------------------------------------


def init_encryption(paths: StorePaths) -> str | None:
    """Generate a key pair and enable encryption for the store.

    Returns the public recipient string, or ``None`` when an identity already
    exists (nothing is touched in that case).  The identity file must be
    backed up: losing it makes every encrypted note unreadable.
    """
    identity_path = paths.identity_path()
    if identity_path.exists():
        logger.info("Encryption identity already exists. Doing nothing.")
        return None

    identity = x25519.Identity.generate()
    recipient = str(identity.to_public())
    identity_path.write_text(f"{identity}\n", encoding="utf-8")
    paths.config_path().write_text(f'{RECIPIENT_KEY} = "{recipient}"\n', encoding="utf-8")
    logger.info("Generated new encryption identity at: {}", identity_path)
    return recipient


@dataclass
class DecryptReport:
    decrypted: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)
    #: False when the store had no identity and nothing was done
    was_encrypted: bool = True


def decrypt_store(paths: StorePaths) -> DecryptReport:
    """Permanently decrypt every note in every notebook and drop the keys.

    Files without the age header are skipped.  Irreversible: callers must
    confirm with the user first.
    """
    identity_path = paths.identity_path()
    if not identity_path.exists():
        logger.info("Journal is not encrypted (no identity.txt found). Nothing to do.")
        return DecryptReport(was_encrypted=False)

    identity = load_identity(identity_path)
    report = DecryptReport()
    for notebook in sorted(p for p in paths.notebooks_root().iterdir() if p.is_dir()):
        logger.debug("Decrypting notebook: {}", notebook.name)
        for path in sorted(p for p in notebook.iterdir() if p.is_file()):
            payload = classify(path.read_bytes())
            if isinstance(payload, PlainPayload):
                logger.debug("Skipping non-encrypted file: {}", path.name)
                report.skipped.append(path)
                continue
            path.write_bytes(decrypt_bytes(payload.data, identity, path))
            logger.debug("Decrypted {}", path.name)
            report.decrypted.append(path)

    identity_path.unlink()
    config_path = paths.config_path()
    if config_path.exists():
        config_path.unlink()
    logger.info("Successfully decrypted journal and removed encryption keys.")
    return report
