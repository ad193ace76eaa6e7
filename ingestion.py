"""Turn pasted or imported text into the canonical ``{headers, rows}`` shape.

Recognized inputs, tried in this order on the trimmed text:

1. a JSON array of objects;
2. a JSON object wrapping exactly one array of objects, or NDJSON;
3. NDJSON whose first line is an object (retry);
4. tab- or comma-delimited text with double-quoted fields.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional

from cell_coercion import is_number_text, loads_strict, scalar_to_cell
from document_store import synthetic_header
from errors import ParseFailure
from logger import get_logger

logger = get_logger(__name__)

HEADER_MAX_LEN = 50
_LINE_SPLIT = re.compile(r"\r?\n")


@dataclass
class ParsedTable:
    headers: List[str]
    rows: List[List[str]]
    kind: str = "delimited"  # json | ndjson | delimited
    delimiter: Optional[str] = None

    @property
    def width(self) -> int:
        return len(self.headers)


@dataclass
class MergePlan:
    new_columns: List[str] = field(default_factory=list)
    rows: List[List[str]] = field(default_factory=list)


# ---------- JSON ----------
def _is_record_list(value) -> bool:
    return (
        isinstance(value, list)
        and len(value) > 0
        and all(isinstance(item, dict) for item in value)
    )


def _table_from_records(records, kind: str) -> Optional[ParsedTable]:
    headers = [str(k) for k in records[0].keys()]
    if not headers:
        return None
    rows = []
    for record in records:
        rows.append([scalar_to_cell(record[k]) if k in record else "" for k in headers])
    return ParsedTable(headers=headers, rows=rows, kind=kind)


def _parse_json_array(text: str) -> Optional[ParsedTable]:
    try:
        data = loads_strict(text)
    except ValueError:
        return None
    if not _is_record_list(data):
        return None
    return _table_from_records(data, "json")


def _parse_ndjson(text: str) -> Optional[ParsedTable]:
    records = []
    for line in _LINE_SPLIT.split(text):
        line = line.strip()
        if not line:
            continue
        try:
            obj = loads_strict(line)
        except ValueError:
            continue
        if isinstance(obj, dict):
            records.append(obj)
    if not records:
        return None
    return _table_from_records(records, "ndjson")


def _parse_json_object(text: str) -> Optional[ParsedTable]:
    try:
        data = loads_strict(text)
    except ValueError:
        data = None

    if isinstance(data, dict) and len(data) == 1:
        (inner,) = data.values()
        if _is_record_list(inner):
            return _table_from_records(inner, "json")

    table = _parse_ndjson(text)
    if table is None and isinstance(data, dict) and data:
        # a pretty-printed single object spans lines that fail on their own
        table = _table_from_records([data], "json")
    return table


# ---------- delimited ----------
def detect_delimiter(lines) -> str:
    return "\t" if any("\t" in line for line in lines) else ","


def split_line(line: str, delimiter: str) -> List[str]:
    cells = []
    current = []
    in_quotes = False
    i = 0
    n = len(line)
    while i < n:
        ch = line[i]
        if ch == '"':
            if in_quotes and i + 1 < n and line[i + 1] == '"':
                current.append('"')
                i += 2
                continue
            in_quotes = not in_quotes
        elif ch == delimiter and not in_quotes:
            cells.append("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1
    cells.append("".join(current))
    return cells


def looks_like_header(cells) -> bool:
    return all(not is_number_text(c) and len(c) < HEADER_MAX_LEN for c in cells)


def _parse_delimited(text: str) -> Optional[ParsedTable]:
    lines = [line for line in _LINE_SPLIT.split(text) if line.strip()]
    if not lines:
        return None
    delimiter = detect_delimiter(lines)
    parsed = [split_line(line, delimiter) for line in lines]

    if looks_like_header(parsed[0]):
        headers = parsed[0]
        data = parsed[1:]
    else:
        headers = []
        data = parsed

    width = max([len(headers)] + [len(row) for row in data])
    headers = headers + [synthetic_header(i) for i in range(len(headers), width)]
    rows = [row + [""] * (width - len(row)) for row in data]
    return ParsedTable(headers=headers, rows=rows, kind="delimited", delimiter=delimiter)


# ---------- entry points ----------
def _first_line(text: str) -> str:
    for line in _LINE_SPLIT.split(text):
        if line.strip():
            return line.strip()
    return ""


def parse(text) -> ParsedTable:
    """Classify ``text`` and normalize it; raises ParseFailure when nothing fits."""
    if text is None or not str(text).strip():
        raise ParseFailure("Clipboard is empty")
    text = str(text)
    stripped = text.strip()

    table = None
    json_like = False
    if stripped.startswith("["):
        json_like = True
        table = _parse_json_array(stripped)
    elif stripped.startswith("{"):
        json_like = True
        table = _parse_json_object(stripped)

    if table is None and _first_line(stripped).startswith("{"):
        json_like = True
        table = _parse_ndjson(stripped)

    if table is None and not json_like:
        table = _parse_delimited(text)

    if table is None:
        raise ParseFailure("Unrecognized format")
    if not table.rows:
        raise ParseFailure("No rows found")

    logger.debug(
        "Parsed %s input: %d rows x %d columns", table.kind, len(table.rows), table.width
    )
    return table


def reconcile(existing_headers, parsed: ParsedTable) -> MergePlan:
    """Plan a merge of ``parsed`` rows below a document with ``existing_headers``.

    Widths are reconciled by widening to the larger one: the plan lists the
    synthetic columns to append to the document and the incoming rows padded
    to the final width. Columns are never dropped.
    """
    current = len(existing_headers)
    width = max(current, parsed.width)
    new_columns = [synthetic_header(i) for i in range(current, width)]
    rows = [list(row) + [""] * (width - len(row)) for row in parsed.rows]
    if new_columns:
        logger.info("Widening document from %d to %d columns for paste", current, width)
    return MergePlan(new_columns=new_columns, rows=rows)
