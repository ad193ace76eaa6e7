import copy
from contextlib import contextmanager

import pandas as pd

from column_types import ColumnType, infer_column_types
from errors import InvariantViolation, MinimumCardinality
from logger import get_logger

logger = get_logger(__name__)

DEFAULT_HEADERS = ["column1", "column2", "column3"]


def synthetic_header(position: int) -> str:
    """Name for a generated column at 0-based ``position``."""
    return f"column{position + 1}"


class DocumentStore:
    """Owns the header list, the row matrix and the inferred column types.

    Every mutation keeps ``len(row) == len(headers)`` for all rows. Callers
    never touch ``headers``/``rows`` directly; they go through commands that
    call the structural operations below.
    """

    def __init__(self, headers=None, rows=None):
        self.headers: list[str] = []
        self.rows: list[list[str]] = []
        self.column_types: list[ColumnType] = []
        self._saved_headers: list[str] | None = None
        self._saved_rows: list[list[str]] | None = None
        self._defer_depth = 0
        self._types_stale = False
        if headers is not None:
            self.replace(headers, rows or [])

    # ---------- whole-document ----------
    @classmethod
    def new_document(cls):
        store = cls()
        store.replace(list(DEFAULT_HEADERS), [[""] * len(DEFAULT_HEADERS)])
        return store

    def replace(self, headers, rows):
        headers = [str(h) for h in headers]
        normalized = []
        for i, row in enumerate(rows):
            cells = ["" if c is None else str(c) for c in row]
            if len(cells) != len(headers):
                raise InvariantViolation(
                    f"Row {i} has {len(cells)} cells, expected {len(headers)}"
                )
            normalized.append(cells)
        self.headers = headers
        self.rows = normalized
        self.refresh_types()
        logger.debug("Document replaced: %d rows x %d columns", len(normalized), len(headers))

    def mark_saved(self):
        self._saved_headers = list(self.headers)
        self._saved_rows = copy.deepcopy(self.rows)

    @property
    def modified(self) -> bool:
        if self._saved_headers is None or self._saved_rows is None:
            return True
        return self.headers != self._saved_headers or self.rows != self._saved_rows

    def is_placeholder(self) -> bool:
        return len(self.rows) == 1 and all(cell == "" for cell in self.rows[0])

    def refresh_types(self):
        self.column_types = infer_column_types(self.rows, width=len(self.headers))
        self._types_stale = False

    def _structure_changed(self):
        if self._defer_depth:
            self._types_stale = True
        else:
            self.refresh_types()

    @contextmanager
    def deferred_types(self):
        """Batch structural edits; column types are re-inferred once on exit."""
        self._defer_depth += 1
        try:
            yield self
        finally:
            self._defer_depth -= 1
            if not self._defer_depth and self._types_stale:
                self.refresh_types()

    def snapshot(self):
        return list(self.headers), copy.deepcopy(self.rows)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.rows, columns=list(self.headers), dtype="object")

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.headers)

    # ---------- index checks ----------
    def _check_row(self, row: int):
        if not 0 <= row < len(self.rows):
            raise InvariantViolation(f"Row index {row} out of range")

    def _check_col(self, col: int):
        if not 0 <= col < len(self.headers):
            raise InvariantViolation(f"Column index {col} out of range")

    # ---------- cells ----------
    def get_cell(self, row: int, col: int) -> str:
        self._check_row(row)
        self._check_col(col)
        return self.rows[row][col]

    def set_cell(self, row: int, col: int, value) -> bool:
        self._check_row(row)
        self._check_col(col)
        value = "" if value is None else str(value)
        if self.rows[row][col] == value:
            return False
        self.rows[row][col] = value
        return True

    # ---------- rows ----------
    def insert_row(self, index: int, row_data):
        if not 0 <= index <= len(self.rows):
            raise InvariantViolation(f"Row insert position {index} out of range")
        cells = ["" if c is None else str(c) for c in row_data]
        if len(cells) != len(self.headers):
            raise InvariantViolation(
                f"Row has {len(cells)} cells, expected {len(self.headers)}"
            )
        self.rows.insert(index, cells)
        self._structure_changed()

    def remove_row(self, index: int) -> list[str]:
        self._check_row(index)
        if len(self.rows) <= 1:
            raise MinimumCardinality("Cannot delete last row")
        removed = self.rows.pop(index)
        self._structure_changed()
        return removed

    # ---------- columns ----------
    def insert_column(self, index: int, name: str, column_data=None):
        if not 0 <= index <= len(self.headers):
            raise InvariantViolation(f"Column insert position {index} out of range")
        if column_data is None:
            column_data = [""] * len(self.rows)
        if len(column_data) != len(self.rows):
            raise InvariantViolation(
                f"Column has {len(column_data)} values but document has {len(self.rows)} rows"
            )
        self.headers.insert(index, str(name))
        for row, value in zip(self.rows, column_data):
            row.insert(index, "" if value is None else str(value))
        self._structure_changed()

    def remove_column(self, index: int):
        self._check_col(index)
        if len(self.headers) <= 1:
            raise MinimumCardinality("Cannot delete last column")
        name = self.headers.pop(index)
        column_data = [row.pop(index) for row in self.rows]
        self._structure_changed()
        return name, column_data

    def rename_header(self, index: int, name: str):
        self._check_col(index)
        self.headers[index] = str(name)
