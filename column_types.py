from enum import Enum

import numpy as np
import pandas as pd

from cell_coercion import is_boolean_text, is_number_text

SAMPLE_SIZE = 100
THRESHOLD = 0.9


class ColumnType(str, Enum):
    NUMBER = "number"
    BOOLEAN = "boolean"
    STRING = "string"


def _classify(values: pd.Series) -> ColumnType:
    texts = values.fillna("").astype(str)
    non_empty = texts[texts != ""]
    if non_empty.empty:
        return ColumnType.STRING

    stripped = non_empty.str.strip()
    numeric = pd.to_numeric(stripped, errors="coerce").to_numpy(dtype="float64")
    num_count = int(np.isfinite(numeric).sum())
    bool_count = int(stripped.str.lower().isin(["true", "false"]).sum())

    total = len(non_empty)
    if num_count / total > THRESHOLD:
        return ColumnType.NUMBER
    if bool_count / total > THRESHOLD:
        return ColumnType.BOOLEAN
    return ColumnType.STRING


def infer_column_types(rows, width: int | None = None) -> list[ColumnType]:
    """Classify each column from at most the first SAMPLE_SIZE rows."""
    if width is None:
        width = len(rows[0]) if rows else 0
    if width == 0:
        return []
    sample = list(rows[:SAMPLE_SIZE])
    if not sample:
        return [ColumnType.STRING] * width

    frame = pd.DataFrame(sample, columns=range(width), dtype="object")
    return [_classify(frame[col]) for col in range(width)]


def is_valid_for_type(cell, column_type: ColumnType) -> bool:
    """False when a non-empty cell does not fit its column's inferred type."""
    text = "" if cell is None else str(cell)
    if text == "":
        return True
    if column_type == ColumnType.NUMBER:
        return is_number_text(text)
    if column_type == ColumnType.BOOLEAN:
        return is_boolean_text(text)
    return True
