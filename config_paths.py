import json
import os

HOME = os.path.expanduser("~")
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME")
CONFIG_HOME = XDG_CONFIG_HOME if XDG_CONFIG_HOME else os.path.join(HOME, ".config")
CONFIG_DIR = os.path.join(CONFIG_HOME, "tabedit")
CONFIG_JSON = os.path.join(CONFIG_DIR, "config.json")

# default settings
LOG_LEVEL_DEFAULT = "WARNING"
CLIPBOARD_PASTE_COMMAND_DEFAULT = ["wl-paste", "--no-newline"]
CLIPBOARD_COPY_COMMAND_DEFAULT = ["wl-copy"]
DEFAULT_EXPORT_FORMAT_DEFAULT = "csv"
EXPORT_FORMATS = {"json", "jsonl", "csv"}
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def ensure_config_dirs():
    os.makedirs(CONFIG_DIR, exist_ok=True)


def write_default_config() -> bool:
    """Write config.json with the default settings; False if it already exists."""
    ensure_config_dirs()
    if os.path.exists(CONFIG_JSON):
        return False
    data = {
        "log_level": LOG_LEVEL_DEFAULT,
        "clipboard": {
            "paste": list(CLIPBOARD_PASTE_COMMAND_DEFAULT),
            "copy": list(CLIPBOARD_COPY_COMMAND_DEFAULT),
        },
        "default_export_format": DEFAULT_EXPORT_FORMAT_DEFAULT,
    }
    with open(CONFIG_JSON, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    return True


def _is_argv(value) -> bool:
    return isinstance(value, list) and bool(value) and all(isinstance(x, str) for x in value)


def load_config():
    cfg = {
        "LOG_LEVEL": LOG_LEVEL_DEFAULT,
        "CLIPBOARD_PASTE_COMMAND": list(CLIPBOARD_PASTE_COMMAND_DEFAULT),
        "CLIPBOARD_COPY_COMMAND": list(CLIPBOARD_COPY_COMMAND_DEFAULT),
        "DEFAULT_EXPORT_FORMAT": DEFAULT_EXPORT_FORMAT_DEFAULT,
    }

    if not os.path.exists(CONFIG_JSON):
        return cfg

    try:
        with open(CONFIG_JSON, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return cfg
    if not isinstance(data, dict):
        return cfg

    level = data.get("log_level")
    if isinstance(level, str) and level.upper() in LOG_LEVELS:
        cfg["LOG_LEVEL"] = level.upper()

    clipboard = data.get("clipboard")
    if isinstance(clipboard, dict):
        if _is_argv(clipboard.get("paste")):
            cfg["CLIPBOARD_PASTE_COMMAND"] = list(clipboard["paste"])
        if _is_argv(clipboard.get("copy")):
            cfg["CLIPBOARD_COPY_COMMAND"] = list(clipboard["copy"])

    fmt = data.get("default_export_format")
    if isinstance(fmt, str) and fmt.lower() in EXPORT_FORMATS:
        cfg["DEFAULT_EXPORT_FORMAT"] = fmt.lower()

    return cfg
