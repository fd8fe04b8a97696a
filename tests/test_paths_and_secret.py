from __future__ import annotations

import errno
from pathlib import Path

import pytest

from bender_config.models import Config
from bender_config.paths import check_paths, exists, is_writeable
from bender_config.secret import (
    SECRET_LENGTH,
    derive_salt,
    ensure_secret,
    generate_secret,
    read_secret,
    secret_path,
    write_secret,
)


def _config(tmp_path: Path) -> Config:
    return Config(
        paths={
            "config": str(tmp_path / "etc" / "config.toml"),
            "private": str(tmp_path / "private"),
            "upload": str(tmp_path / "data" / "uploads"),
            "blend": str(tmp_path / "data" / "blendfiles"),
        }
    )


def test_directory_is_created(tmp_path: Path):
    target = tmp_path / "a" / "b"
    assert is_writeable(target)
    assert target.is_dir()


def test_file_probe_leaves_nothing_behind(tmp_path: Path):
    target = tmp_path / "sub" / "probe.toml"
    assert is_writeable(target)
    assert target.parent.is_dir()
    assert not target.exists()


def test_existing_file_is_kept(tmp_path: Path):
    target = tmp_path / "config.toml"
    target.write_text("servername = 'x'\n", encoding="utf-8")
    assert is_writeable(target)
    assert target.read_text(encoding="utf-8") == "servername = 'x'\n"


def test_permission_failure_is_false(tmp_path: Path, monkeypatch):
    def deny(self, *args, **kwargs):
        raise PermissionError(errno.EACCES, "denied", str(self))

    monkeypatch.setattr(Path, "mkdir", deny)
    assert is_writeable(tmp_path / "nope") is False
    assert is_writeable(tmp_path / "missing" / "file.txt") is False


def test_other_errors_propagate(tmp_path: Path, monkeypatch):
    def broken(self, *args, **kwargs):
        raise OSError(errno.EIO, "I/O error", str(self))

    monkeypatch.setattr(Path, "mkdir", broken)
    with pytest.raises(OSError):
        is_writeable(tmp_path / "dir")


def test_exists(tmp_path: Path):
    assert exists(tmp_path)
    assert not exists(tmp_path / "missing")


def test_check_paths_skips_config_file(tmp_path: Path):
    cfg = _config(tmp_path)
    assert check_paths(cfg) == {"private": True, "upload": True, "blend": True}
    assert not (tmp_path / "etc").exists()


def test_generate_secret():
    secret = generate_secret()
    assert len(secret) == SECRET_LENGTH
    assert secret.isalnum() and secret.isascii()
    assert generate_secret(16) != generate_secret(16)
    with pytest.raises(ValueError):
        generate_secret(0)


def test_secret_file_lifecycle(tmp_path: Path):
    cfg = _config(tmp_path)
    assert secret_path(cfg) == tmp_path / "private" / "appsecret"
    first = ensure_secret(cfg)
    assert ensure_secret(cfg) == first
    assert (secret_path(cfg).stat().st_mode & 0o777) == 0o600

    write_secret(cfg, "abc123")
    assert read_secret(cfg) == "abc123"


def test_salt_is_stable():
    assert derive_salt("abc") == derive_salt("abc")
    assert derive_salt("abc") != derive_salt("abd")
    assert len(derive_salt("abc")) == 32
