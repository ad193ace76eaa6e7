import csv
import json
import os
from dataclasses import dataclass, field
from typing import List

import pandas as pd

from cell_coercion import cell_to_json_value, compact_json, loads_strict, scalar_to_cell
from document_store import DEFAULT_HEADERS, synthetic_header
from errors import ExternalIOFailure
from logger import get_logger

logger = get_logger(__name__)

KEY_VALUE_HEADERS = ["Key", "Value"]


@dataclass
class LoadedFile:
    file_path: str
    file_type: str
    json_format: str = "array"
    headers: List[str] = field(default_factory=list)
    rows: List[List[str]] = field(default_factory=list)


def sanitize_json_text(content: str) -> str:
    """Replace control characters other than newline, carriage return and tab."""
    return "".join(
        " " if (ord(ch) < 32 or 127 <= ord(ch) < 160) and ch not in "\n\r\t" else ch
        for ch in content
    )


def _union_keys(records) -> List[str]:
    headers: List[str] = []
    seen = set()
    for record in records:
        for key in record.keys():
            if key not in seen:
                seen.add(key)
                headers.append(key)
    return headers


def _records_to_rows(records, headers) -> List[List[str]]:
    return [[scalar_to_cell(r[h]) if h in r else "" for h in headers] for r in records]


def _row_to_record(headers, row) -> dict:
    record = {}
    for i, header in enumerate(headers):
        value = row[i] if i < len(row) else ""
        record[header] = cell_to_json_value(value)
    return record


class FileTypeHandler:
    SUPPORTED = {".json": "json", ".jsonl": "jsonl", ".ndjson": "jsonl", ".csv": "csv"}
    FORMATS = {"json", "jsonl", "csv"}

    def __init__(self, path: str, file_type: str | None = None):
        self.path = path
        _, ext = os.path.splitext(path)
        self.ext = ext.lower()

        if file_type is not None:
            file_type = file_type.lower()
            if file_type not in self.FORMATS:
                raise ExternalIOFailure(f"Unsupported file type: {file_type}")
            self.file_type = file_type
        elif self.ext in self.SUPPORTED:
            self.file_type = self.SUPPORTED[self.ext]
        else:
            raise ExternalIOFailure("Unsupported file type (use .json, .jsonl or .csv)")

    # ---------- load ----------
    def load_or_create(self) -> LoadedFile:
        if not os.path.exists(self.path) or os.path.getsize(self.path) == 0:
            return self._default_payload()

        if self.file_type == "csv":
            return self._load_csv()

        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                content = sanitize_json_text(fh.read())
        except (OSError, UnicodeDecodeError) as exc:
            raise ExternalIOFailure(f"Failed to read file: {exc}")

        if self.file_type == "json":
            return self._load_json(content)
        return self._load_jsonl(content)

    def _default_payload(self) -> LoadedFile:
        return LoadedFile(
            file_path=self.path,
            file_type=self.file_type,
            headers=list(DEFAULT_HEADERS),
            rows=[[""] * len(DEFAULT_HEADERS)],
        )

    def _load_json(self, content: str) -> LoadedFile:
        try:
            data = loads_strict(content)
        except ValueError as exc:
            raise ExternalIOFailure(f"Failed to parse JSON: {exc}")

        if isinstance(data, list):
            records = [item for item in data if isinstance(item, dict)]
            headers = _union_keys(records)
            return LoadedFile(
                file_path=self.path,
                file_type="json",
                json_format="array",
                headers=headers,
                rows=_records_to_rows(records, headers),
            )
        if isinstance(data, dict):
            rows = [[str(k), scalar_to_cell(v)] for k, v in data.items()]
            return LoadedFile(
                file_path=self.path,
                file_type="json",
                json_format="object",
                headers=list(KEY_VALUE_HEADERS),
                rows=rows,
            )
        raise ExternalIOFailure("JSON must be an object or array")

    def _load_jsonl(self, content: str) -> LoadedFile:
        records = []
        for line in content.splitlines():
            line = line.strip()
            if not line:
                continue
            try:
                obj = loads_strict(line)
            except ValueError:
                logger.debug("Skipping unparseable JSONL line in %s", self.path)
                continue
            if isinstance(obj, dict):
                records.append(obj)
        headers = _union_keys(records)
        return LoadedFile(
            file_path=self.path,
            file_type="jsonl",
            headers=headers,
            rows=_records_to_rows(records, headers),
        )

    def _csv_widths(self) -> List[int]:
        """Field count of every non-blank record, quoted newlines included."""
        try:
            with open(self.path, "r", encoding="utf-8", newline="") as fh:
                return [len(record) for record in csv.reader(fh) if record]
        except (csv.Error, UnicodeDecodeError, OSError) as exc:
            raise ExternalIOFailure(f"Failed to read CSV: {exc}")

    def _load_csv(self) -> LoadedFile:
        widths = self._csv_widths()
        if not widths:
            return self._default_payload()
        width = max(widths)
        try:
            df = pd.read_csv(
                self.path,
                header=None,
                names=range(width),
                dtype=str,
                keep_default_na=False,
                na_filter=False,
                encoding="utf-8",
            )
        except pd.errors.EmptyDataError:
            return self._default_payload()
        except (pd.errors.ParserError, UnicodeDecodeError, OSError) as exc:
            raise ExternalIOFailure(f"Failed to read CSV: {exc}")

        df = df.fillna("")
        if df.empty:
            return self._default_payload()
        headers = [str(h) for h in df.iloc[0].tolist()]
        # records wider than the header line get generated names
        headers = headers[: widths[0]] + [synthetic_header(i) for i in range(widths[0], width)]
        if width > widths[0]:
            logger.info("Padded CSV header from %d to %d columns in %s", widths[0], width, self.path)
        rows = [[str(c) for c in row] for row in df.iloc[1:].values.tolist()]
        return LoadedFile(file_path=self.path, file_type="csv", headers=headers, rows=rows)

    # ---------- save ----------
    def save(self, headers, rows, json_format: str = "array") -> None:
        try:
            if self.file_type == "json":
                self._write_json(headers, rows, json_format)
            elif self.file_type == "jsonl":
                self._write_jsonl(headers, rows)
            else:
                self._write_csv(headers, rows)
        except OSError as exc:
            raise ExternalIOFailure(f"Failed to write file: {exc}")
        logger.info("Wrote %d rows to %s (%s)", len(rows), self.path, self.file_type)

    def _write_json(self, headers, rows, json_format):
        if json_format == "object" and list(headers) == KEY_VALUE_HEADERS:
            payload = {}
            for row in rows:
                key = row[0] if row else ""
                if key:
                    payload[key] = cell_to_json_value(row[1] if len(row) > 1 else "")
        else:
            payload = [_row_to_record(headers, row) for row in rows]
        with open(self.path, "w", encoding="utf-8") as fh:
            fh.write(json.dumps(payload, indent=2, ensure_ascii=False))

    def _write_jsonl(self, headers, rows):
        with open(self.path, "w", encoding="utf-8") as fh:
            for row in rows:
                fh.write(compact_json(_row_to_record(headers, row)) + "\n")

    def _write_csv(self, headers, rows):
        df = pd.DataFrame(rows, columns=list(headers), dtype="object")
        df.to_csv(self.path, index=False)


def export_document(headers, rows, target_path: str, target_format: str | None = None) -> None:
    """Write headers/rows to ``target_path`` as a plain array, whatever the source file was."""
    handler = FileTypeHandler(target_path, file_type=target_format)
    handler.save(headers, rows, json_format="array")
