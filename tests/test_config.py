import json

import pytest

from echoping.config.config_manager import (
    ConfigError,
    ConfigManager,
    ConfigSchema,
    create_default_config,
)


def test_defaults_match_classic_ping() -> None:
    config = ConfigManager()

    assert config.get("ping.count") == 4
    assert config.get("ping.payload_size") == 32
    assert config.get("ping.timeout_ms") == 1000
    assert config.get("ping.strict_reply_matching") is False
    assert config.get("output.log_level") == "WARNING"


def test_defaults_pass_schema() -> None:
    ConfigSchema.validate(ConfigSchema.get_defaults())


def test_missing_file_keeps_defaults(tmp_path) -> None:
    config = ConfigManager(str(tmp_path / "absent.json"))

    assert config.load() is False
    assert config.get("ping.count") == 4


def test_load_merges_file_over_defaults(tmp_path) -> None:
    path = tmp_path / "echoping.json"
    path.write_text(json.dumps({"ping": {"count": 10, "timeout_ms": 250}}), encoding="utf-8")

    config = ConfigManager(str(path))

    assert config.load() is True
    assert config.get("ping.count") == 10
    assert config.get("ping.timeout_ms") == 250
    assert config.get("ping.payload_size") == 32


def test_default_file_in_working_directory(tmp_path) -> None:
    (tmp_path / "echoping.json").write_text(json.dumps({"ping": {"count": 2}}), encoding="utf-8")

    config = ConfigManager()

    assert config.load() is True
    assert config.get("ping.count") == 2


def test_config_file_from_environment(tmp_path, monkeypatch) -> None:
    path = tmp_path / "custom.json"
    path.write_text(json.dumps({"ping": {"payload_size": 64}}), encoding="utf-8")
    monkeypatch.setenv("ECHOPING_CONFIG", str(path))

    config = ConfigManager()
    config.load()

    assert config.config_file == str(path)
    assert config.get("ping.payload_size") == 64


@pytest.mark.parametrize(
    "document",
    [
        {"ping": {"count": -1}},
        {"ping": {"payload_size": 70000}},
        {"ping": {"timeout_ms": 0}},
        {"ping": {"count": "four"}},
        {"ping": {"interval_ms": 10}},
        {"output": {"log_level": "TRACE"}},
        {"version": "one"},
    ],
)
def test_invalid_file_falls_back_to_defaults(tmp_path, document) -> None:
    path = tmp_path / "echoping.json"
    path.write_text(json.dumps(document), encoding="utf-8")

    config = ConfigManager(str(path))

    assert config.load() is False
    assert config.config == ConfigSchema.get_defaults()


def test_unparsable_file_falls_back_to_defaults(tmp_path) -> None:
    path = tmp_path / "echoping.json"
    path.write_text("{not json", encoding="utf-8")

    config = ConfigManager(str(path))

    assert config.load() is False
    assert config.get("ping.count") == 4


def test_schema_error_names_location() -> None:
    document = ConfigSchema.get_defaults()
    document["ping"]["count"] = -5

    with pytest.raises(ConfigError, match="ping.count"):
        ConfigSchema.validate(document)


def test_environment_overrides_file(tmp_path, monkeypatch) -> None:
    path = tmp_path / "echoping.json"
    path.write_text(json.dumps({"ping": {"count": 10}}), encoding="utf-8")
    monkeypatch.setenv("ECHOPING_PING_COUNT", "1")
    monkeypatch.setenv("ECHOPING_PING_STRICT_REPLY_MATCHING", "true")

    config = ConfigManager(str(path))
    config.load()

    assert config.get("ping.count") == 1
    assert config.get("ping.strict_reply_matching") is True


def test_set_and_save_round_trip(tmp_path) -> None:
    path = tmp_path / "saved.json"
    config = ConfigManager(str(path))
    config.set("ping.count", 7)

    assert config.modified
    assert config.save() is True
    assert not config.modified

    reloaded = ConfigManager(str(path))
    assert reloaded.load() is True
    assert reloaded.get("ping.count") == 7


def test_create_default_config(tmp_path) -> None:
    path = tmp_path / "echoping.json"

    assert create_default_config(str(path)) is True
    assert json.loads(path.read_text(encoding="utf-8")) == ConfigSchema.get_defaults()


def test_export_for_cli() -> None:
    assert ConfigManager().export_for_cli() == {
        "count": 4,
        "payload_size": 32,
        "timeout_ms": 1000,
        "strict_reply_matching": False,
        "colors_enabled": True,
        "log_level": "WARNING",
    }


def test_validate_accepts_defaults_and_overrides(monkeypatch) -> None:
    monkeypatch.setenv("ECHOPING_PING_COUNT", "7")
    monkeypatch.setenv("ECHOPING_OUTPUT_COLORS_ENABLED", "off")

    config = ConfigManager()

    assert config.validate() is True
    assert config.resolved()["ping"]["count"] == 7
    assert config.resolved()["output"]["colors_enabled"] is False
    assert config.config["ping"]["count"] == 4


@pytest.mark.parametrize(
    "name,value",
    [
        ("ECHOPING_PING_COUNT", "3.5"),
        ("ECHOPING_PING_COUNT", "true"),
        ("ECHOPING_PING_PAYLOAD_SIZE", "lots"),
        ("ECHOPING_PING_TIMEOUT_MS", "0"),
        ("ECHOPING_PING_STRICT_REPLY_MATCHING", "1"),
    ],
)
def test_validate_rejects_mistyped_environment_values(monkeypatch, name, value) -> None:
    monkeypatch.setenv(name, value)

    assert ConfigManager().validate() is False
