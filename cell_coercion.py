import json
import math
import re

_INT_RE = re.compile(r"^[+-]?\d+$")
_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")


def _reject_constant(name):
    raise ValueError(f"Non-standard JSON constant: {name}")


def _finite_float(text):
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"Number out of range: {text}")
    return value


def parse_number(text):
    """Return an int/float for a finite decimal literal, else None."""
    if text is None:
        return None
    stripped = str(text).strip()
    if not _NUMBER_RE.match(stripped):
        return None
    if _INT_RE.match(stripped):
        return int(stripped)
    value = float(stripped)
    if not math.isfinite(value):
        return None
    return value


def is_number_text(text) -> bool:
    return parse_number(text) is not None


def is_boolean_text(text) -> bool:
    if text is None:
        return False
    return str(text).strip().lower() in {"true", "false"}


def format_number(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def compact_json(value) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def loads_strict(text):
    """json.loads without NaN/Infinity, which cannot be written back out.

    Overflowing literals such as ``1e400`` are rejected too.
    """
    return json.loads(text, parse_constant=_reject_constant, parse_float=_finite_float)


def scalar_to_cell(value) -> str:
    """Render one parsed JSON value as grid cell text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, str):
        return value
    return compact_json(value)


def json_scalar_from_text(text):
    """Literal-match user text into null/bool/number, falling back to the string."""
    text = "" if text is None else str(text)
    if text == "null":
        return None
    if text == "true":
        return True
    if text == "false":
        return False
    number = parse_number(text)
    if number is not None:
        return number
    return text


def cell_to_json_value(text):
    """Convert a grid cell back into the JSON value written to disk."""
    text = "" if text is None else str(text)
    if text == "":
        return None
    try:
        return loads_strict(text)
    except ValueError:
        pass
    number = parse_number(text)
    if number is not None:
        return number
    return text
