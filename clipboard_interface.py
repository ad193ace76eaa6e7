import subprocess

from config_paths import CLIPBOARD_COPY_COMMAND_DEFAULT, CLIPBOARD_PASTE_COMMAND_DEFAULT
from errors import ExternalIOFailure
from logger import get_logger

logger = get_logger(__name__)


def read_clipboard(config=None) -> str:
    argv = (config or {}).get("CLIPBOARD_PASTE_COMMAND") or CLIPBOARD_PASTE_COMMAND_DEFAULT
    try:
        result = subprocess.run(argv, capture_output=True, text=True, check=True)
    except FileNotFoundError:
        raise ExternalIOFailure(f"Clipboard command not found: {argv[0]}")
    except subprocess.CalledProcessError as exc:
        logger.warning("Clipboard read failed (%s): %s", argv, exc.stderr)
        raise ExternalIOFailure("Paste failed")
    return result.stdout


def write_clipboard(text: str, config=None) -> None:
    argv = (config or {}).get("CLIPBOARD_COPY_COMMAND") or CLIPBOARD_COPY_COMMAND_DEFAULT
    try:
        subprocess.run(argv, input=text, text=True, check=True)
    except FileNotFoundError:
        raise ExternalIOFailure(f"Clipboard command not found: {argv[0]}")
    except subprocess.CalledProcessError:
        logger.warning("Clipboard write failed (%s)", argv)
        raise ExternalIOFailure("Copy failed")
