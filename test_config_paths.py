import json
import tempfile
from pathlib import Path

import config_paths


def _load_with(path):
    orig_dir = config_paths.CONFIG_DIR
    orig_json = config_paths.CONFIG_JSON
    try:
        config_paths.CONFIG_DIR = str(path.parent)
        config_paths.CONFIG_JSON = str(path)
        return config_paths.load_config()
    finally:
        config_paths.CONFIG_DIR = orig_dir
        config_paths.CONFIG_JSON = orig_json


def test_load_config_defaults_without_json():
    with tempfile.TemporaryDirectory() as tmp:
        cfg = _load_with(Path(tmp) / "tabedit" / "config.json")

    assert cfg["LOG_LEVEL"] == "WARNING"
    assert cfg["CLIPBOARD_PASTE_COMMAND"] == ["wl-paste", "--no-newline"]
    assert cfg["CLIPBOARD_COPY_COMMAND"] == ["wl-copy"]
    assert cfg["DEFAULT_EXPORT_FORMAT"] == "csv"


def test_load_config_reads_json_overrides():
    with tempfile.TemporaryDirectory() as tmp:
        cfg_path = Path(tmp) / "config.json"
        cfg_path.write_text(
            json.dumps(
                {
                    "log_level": "debug",
                    "clipboard": {
                        "paste": ["xclip", "-o", "-selection", "clipboard"],
                        "copy": ["xclip", "-selection", "clipboard"],
                    },
                    "default_export_format": "JSONL",
                }
            )
        )

        cfg = _load_with(cfg_path)

    assert cfg["LOG_LEVEL"] == "DEBUG"
    assert cfg["CLIPBOARD_PASTE_COMMAND"] == ["xclip", "-o", "-selection", "clipboard"]
    assert cfg["CLIPBOARD_COPY_COMMAND"] == ["xclip", "-selection", "clipboard"]
    assert cfg["DEFAULT_EXPORT_FORMAT"] == "jsonl"


def test_load_config_ignores_bad_values():
    with tempfile.TemporaryDirectory() as tmp:
        cfg_path = Path(tmp) / "config.json"
        cfg_path.write_text(
            json.dumps(
                {
                    "log_level": "loud",
                    "clipboard": {"paste": "xclip -o", "copy": []},
                    "default_export_format": "xlsx",
                }
            )
        )

        cfg = _load_with(cfg_path)

    assert cfg["LOG_LEVEL"] == "WARNING"
    assert cfg["CLIPBOARD_PASTE_COMMAND"] == ["wl-paste", "--no-newline"]
    assert cfg["CLIPBOARD_COPY_COMMAND"] == ["wl-copy"]
    assert cfg["DEFAULT_EXPORT_FORMAT"] == "csv"


def test_load_config_survives_broken_json():
    with tempfile.TemporaryDirectory() as tmp:
        cfg_path = Path(tmp) / "config.json"
        cfg_path.write_text("{not json")

        cfg = _load_with(cfg_path)

    assert cfg["LOG_LEVEL"] == "WARNING"


def test_write_default_config_only_once(monkeypatch, tmp_path):
    cfg_dir = tmp_path / "tabedit"
    monkeypatch.setattr(config_paths, "CONFIG_DIR", str(cfg_dir))
    monkeypatch.setattr(config_paths, "CONFIG_JSON", str(cfg_dir / "config.json"))

    assert config_paths.write_default_config()
    assert not config_paths.write_default_config()

    data = json.loads((cfg_dir / "config.json").read_text())
    assert data["default_export_format"] == "csv"
    assert config_paths.load_config()["CLIPBOARD_COPY_COMMAND"] == ["wl-copy"]
