from __future__ import annotations

import hashlib
import logging
import os
import secrets
import string
from pathlib import Path

from .models import Config

SECRET_FILENAME = "appsecret"
SECRET_LENGTH = 128
_ALPHABET = string.ascii_letters + string.digits

logger = logging.getLogger(__name__)


def generate_secret(length: int = SECRET_LENGTH) -> str:
    if length < 1:
        raise ValueError("secret length must be positive")
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


def secret_path(config: Config) -> Path:
    return Path(config.paths.private) / SECRET_FILENAME


def write_secret(config: Config, secret: str | None = None) -> Path:
    """
    Write a (new) secret below the private path, readable by the owner only.
    """
    path = secret_path(config)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(secret or generate_secret(), encoding="utf-8")
    os.chmod(path, 0o600)
    logger.info("Wrote application secret to %s", path)
    return path


def read_secret(config: Config) -> str:
    return secret_path(config).read_text(encoding="utf-8").strip()


def ensure_secret(config: Config) -> str:
    """
    Return the stored secret, generating and writing one if none exists yet.
    """
    if not secret_path(config).exists():
        write_secret(config)
    return read_secret(config)


def derive_salt(secret: str) -> str:
    """
    Stable salt derived from the secret, so services sharing it agree on it.
    """
    return hashlib.sha256(f"bender-salt:{secret}".encode("utf-8")).hexdigest()[:32]
