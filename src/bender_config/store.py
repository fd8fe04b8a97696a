from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile

import tomli_w
from pydantic import ValidationError

from .errors import ConfigError
from .models import DEFAULT_CONFIG_PATH, Config

CONFIG_ENV_VAR = "BENDER_CONFIG"

logger = logging.getLogger(__name__)


def config_path() -> Path:
    """
    Location of the configuration document: $BENDER_CONFIG if set, else the
    system-wide default.
    """
    return Path(os.getenv(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH)


def serialize(config: Config) -> str:
    return tomli_w.dumps(config.model_dump(mode="json"))


def serialize_to_bytes(config: Config) -> bytes:
    return serialize(config).encode("utf-8")


def deserialize(text: str) -> Config:
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Malformed TOML: {exc}") from exc
    try:
        return Config.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def deserialize_from_bytes(data: bytes) -> Config:
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ConfigError(f"Configuration is not valid UTF-8: {exc}") from exc
    return deserialize(text)


def load(path: str | Path) -> Config:
    """
    Read and parse a document. Missing files raise FileNotFoundError,
    malformed ones ConfigError.
    """
    p = Path(path)
    logger.debug("Loading configuration from %s", p)
    return deserialize_from_bytes(p.read_bytes())


def save(config: Config, path: str | Path) -> Path:
    """
    Write the document with a best-effort atomic replace, creating parent
    directories as needed.
    """
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    with NamedTemporaryFile("w", encoding="utf-8", dir=p.parent, delete=False) as tmp:
        tmp.write(serialize(config))
        tmp_path = Path(tmp.name)

    # Temp files are created 0600; services running as other users read this
    os.chmod(tmp_path, 0o644)
    os.replace(tmp_path, p)
    logger.info("Wrote configuration to %s", p)
    return p


def write_changes(config: Config) -> Path:
    return save(config, config.paths.config)


def read_changes(config: Config) -> Config:
    return load(config.paths.config)
