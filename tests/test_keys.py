from __future__ import annotations

import pytest

from bender_config.errors import ConfigError, KeyLookupError
from bender_config.keys import get_key, set_key
from bender_config.models import default_config
from bender_config.wizard.values import FieldKind


def test_get_value_and_section():
    cfg = default_config()
    assert get_key(cfg, "flask.port") == 5000
    assert get_key(cfg, "janitor.errored.delete_history_after") == -1
    assert get_key(cfg, "janitor.finished") == {"delete_data_after": 172800, "delete_history_after": 2592000}
    assert get_key(cfg, "worker")["id"] == str(cfg.worker.id)


def test_unknown_keys():
    cfg = default_config()
    for key in ["", "flask.host", "nope", "flask.port.extra"]:
        with pytest.raises(KeyLookupError):
            get_key(cfg, key)


def test_set_parses_by_kind():
    cfg = default_config()
    updated = set_key(cfg, "flask.port", " 8080 ")
    assert updated.flask.port == 8080
    assert cfg.flask.port == 5000
    assert set_key(cfg, "janitor.canceled.delete_data_after", "-1").janitor.canceled.delete_data_after == -1
    assert set_key(cfg, "servername", "Farm").servername == "Farm"


def test_set_rejects_bad_values_and_managed_fields():
    cfg = default_config()
    with pytest.raises(ConfigError):
        set_key(cfg, "flask.port", "-1")
    with pytest.raises(ConfigError):
        set_key(cfg, "worker.workload", "many")
    with pytest.raises(ConfigError):
        set_key(cfg, "worker.id", "3f1c7f7e-6a53-4c53-9d4e-1b5b2f4f8a10")
    with pytest.raises(ConfigError):
        set_key(cfg, "paths.config", "/tmp/x.toml")
    with pytest.raises(ConfigError):
        set_key(cfg, "janitor", "1")


def test_field_kinds_parse():
    assert FieldKind.UNSIGNED_INT.parse("0") == 0
    assert FieldKind.SIGNED_INT.parse("-30") == -30
    assert FieldKind.TEXT.parse("  Bender ") == "Bender"
    assert str(FieldKind.IDENTIFIER.parse("3F1C7F7E-6A53-4C53-9D4E-1B5B2F4F8A10")) == "3f1c7f7e-6a53-4c53-9d4e-1b5b2f4f8a10"
    for kind, text in [(FieldKind.UNSIGNED_INT, "-1"), (FieldKind.SIGNED_INT, "1e3"), (FieldKind.IDENTIFIER, "x")]:
        with pytest.raises(ValueError):
            kind.parse(text)


def test_set_rejects_values_above_field_maximum():
    cfg = default_config()
    with pytest.raises(ConfigError, match="too large"):
        set_key(cfg, "flask.port", "70000")
    with pytest.raises(ConfigError, match="too large"):
        set_key(cfg, "worker.disk_limit", "250")
    assert set_key(cfg, "worker.disk_limit", "100").worker.disk_limit == 100


def test_parse_with_maximum():
    assert FieldKind.UNSIGNED_INT.parse("65535", 65535) == 65535
    assert FieldKind.SIGNED_INT.parse("-70000", 100) == -70000
    assert FieldKind.TEXT.parse("70000", 100) == "70000"
    with pytest.raises(ValueError, match="too large"):
        FieldKind.UNSIGNED_INT.parse("65536", 65535)
