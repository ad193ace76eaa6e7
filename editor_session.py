import os

from clipboard_interface import read_clipboard, write_clipboard
from column_types import is_valid_for_type
from commands import (
    AddColumn,
    AddRow,
    CommandGroup,
    DeleteColumn,
    DeleteRow,
    EditCell,
    RenameColumn,
)
from document_store import DEFAULT_HEADERS, DocumentStore, synthetic_header
from errors import EditorError, InvariantViolation
from file_type_handler import FileTypeHandler, export_document
from history_manager import HistoryManager
from ingestion import parse, reconcile
from logger import get_logger
from tree_editor import TreeWorkingCopy
from view_projector import ViewState

logger = get_logger(__name__)

TREE_OPERATIONS = {"get", "set", "rename_key", "insert", "delete"}


def _noop_status(_msg, _seconds=3):
    pass


class EditorSession:
    """Owns the document, its command history and the view for one editor window.

    Every user action goes through a method here. Typed failures from the
    core are caught at this level, logged, and surfaced through the status
    callback; the method then returns a falsy value and leaves the document
    as it was.
    """

    def __init__(self, document=None, set_status_cb=None, config=None):
        self.document = document if document is not None else DocumentStore.new_document()
        self.history = HistoryManager()
        self.view = ViewState()
        self.config = config or {}
        self._set_status = set_status_cb or _noop_status

        self.file_path = None
        self.file_type = "json"
        self.json_format = "array"
        self.tree: TreeWorkingCopy | None = None

        self.view.refresh(self.document)

    # ---------- reporting ----------
    def _report(self, exc, prefix: str = ""):
        if isinstance(exc, InvariantViolation):
            logger.error("%s%s", f"{prefix}: " if prefix else "", exc)
        else:
            logger.warning("%s%s", f"{prefix}: " if prefix else "", exc)
        self._set_status(f"{prefix}: {exc}" if prefix else str(exc), 3)

    # ---------- state ----------
    @property
    def modified(self) -> bool:
        return self.document.modified

    @property
    def file_name(self) -> str:
        return os.path.basename(self.file_path) if self.file_path else "Untitled"

    def _swap_document(self, document):
        self.document = document
        self.history.clear()
        self.tree = None
        self.view.first_page()
        self.view.refresh(self.document)

    # ---------- files ----------
    def new_file(self):
        self.file_path = None
        self.file_type = "json"
        self.json_format = "array"
        self._swap_document(DocumentStore.new_document())
        self._set_status("New file", 2)

    def load_file(self, path: str) -> bool:
        try:
            handler = FileTypeHandler(path)
            loaded = handler.load_or_create()
            headers = loaded.headers or list(DEFAULT_HEADERS)
            rows = loaded.rows if loaded.headers else []
            if not rows:
                rows = [[""] * len(headers)]
            document = DocumentStore(headers, rows)
        except EditorError as exc:
            self._report(exc, "Error loading file")
            return False

        document.mark_saved()
        self.file_path = loaded.file_path
        self.file_type = loaded.file_type
        self.json_format = loaded.json_format or "array"
        self._swap_document(document)
        logger.info("Loaded %d rows from %s", document.row_count, path)
        self._set_status(f"Loaded {document.row_count} rows", 3)
        return True

    def save(self, path: str | None = None) -> bool:
        target = path or self.file_path
        if not target:
            self._set_status("Save failed: no file path", 3)
            return False
        try:
            handler = FileTypeHandler(target)
            handler.save(self.document.headers, self.document.rows, self.json_format)
        except EditorError as exc:
            self._report(exc, "Error saving")
            return False

        self.file_path = target
        self.file_type = handler.file_type
        self.document.mark_saved()
        self._set_status("Saved", 2)
        return True

    def export(self, target_path: str, target_format: str | None = None) -> bool:
        try:
            export_document(
                self.document.headers, self.document.rows, target_path, target_format
            )
        except EditorError as exc:
            self._report(exc, "Error exporting")
            return False
        self._set_status("Exported", 2)
        return True

    # ---------- command plumbing ----------
    def _run(self, command, message: str | None = None) -> bool:
        try:
            command.apply(self.document)
        except EditorError as exc:
            self._report(exc)
            return False
        self.history.push(command)
        self.view.refresh(self.document)
        logger.debug("Applied %s", command)
        if message:
            self._set_status(message, 2)
        return True

    def undo(self):
        command = self.history.undo()
        if command is None:
            self._set_status("Nothing to undo", 2)
            return None
        try:
            command.revert(self.document)
        except EditorError as exc:
            self.history.redo()  # put the cursor back on the command that failed
            self._report(exc, "Undo failed")
            return None
        self.view.refresh(self.document)
        self._set_status("Undo", 2)
        return command

    def redo(self):
        command = self.history.redo()
        if command is None:
            self._set_status("Nothing to redo", 2)
            return None
        try:
            command.apply(self.document)
        except EditorError as exc:
            self.history.undo()
            self._report(exc, "Redo failed")
            return None
        self.view.refresh(self.document)
        self._set_status("Redo", 2)
        return command

    # ---------- cells ----------
    def edit_cell(self, row: int, col: int, value) -> bool:
        value = "" if value is None else str(value)
        try:
            old = self.document.get_cell(row, col)
        except EditorError as exc:
            self._report(exc)
            return False
        if old == value:
            return False
        return self._run(EditCell(row, col, old, value))

    def cell_is_valid(self, row: int, col: int) -> bool:
        if not (
            0 <= row < self.document.row_count and 0 <= col < self.document.column_count
        ):
            return False
        return is_valid_for_type(
            self.document.get_cell(row, col), self.document.column_types[col]
        )

    # ---------- rows ----------
    def add_row(self, index: int | None = None, row_data=None):
        if index is None:
            index = self.document.row_count
        if row_data is None:
            row_data = [""] * self.document.column_count
        if not self._run(AddRow(index, tuple(row_data)), "Row added"):
            return None
        self.view.reveal(index)
        return index

    def delete_row(self, index: int) -> bool:
        if not 0 <= index < self.document.row_count:
            self._set_status(f"No row {index}", 3)
            return False
        row_data = tuple(self.document.rows[index])
        return self._run(DeleteRow(index, row_data), "Row deleted")

    def duplicate_row(self, index: int):
        if not 0 <= index < self.document.row_count:
            self._set_status(f"No row {index}", 3)
            return None
        copy = tuple(self.document.rows[index])
        if not self._run(AddRow(index + 1, copy), "Row duplicated"):
            return None
        return index + 1

    # ---------- columns ----------
    def add_column(self, name: str | None = None, index: int | None = None):
        name = (name or "").strip() or synthetic_header(self.document.column_count)
        if index is None:
            index = self.document.column_count
        if not self._run(AddColumn(index, name), "Column added"):
            return None
        return index

    def delete_column(self, index: int) -> bool:
        if not 0 <= index < self.document.column_count:
            self._set_status(f"No column {index}", 3)
            return False
        name = self.document.headers[index]
        column_data = tuple(row[index] for row in self.document.rows)
        return self._run(DeleteColumn(index, name, column_data), "Column deleted")

    def rename_column(self, index: int, name: str) -> bool:
        if not 0 <= index < self.document.column_count:
            self._set_status(f"No column {index}", 3)
            return False
        old = self.document.headers[index]
        # an empty name keeps the current one
        name = name or old
        if name == old:
            return False
        return self._run(RenameColumn(index, old, name), f"Renamed column '{old}' to '{name}'")

    # ---------- clipboard ----------
    def paste(self, text) -> bool:
        try:
            parsed = parse(text)
        except EditorError as exc:
            self._report(exc, "Paste failed")
            return False

        if self.document.is_placeholder():
            try:
                self.document.replace(parsed.headers, parsed.rows)
            except EditorError as exc:
                self._report(exc, "Paste failed")
                return False
            self.history.clear()
            self.view.first_page()
            self.view.refresh(self.document)
            logger.info("Paste replaced placeholder document (%s)", parsed.kind)
            self._set_status(f"Pasted {len(parsed.rows)} rows", 2)
            return True

        plan = reconcile(self.document.headers, parsed)
        width = self.document.column_count
        start = self.document.row_count
        commands = [AddColumn(width + i, name) for i, name in enumerate(plan.new_columns)]
        commands += [AddRow(start + i, tuple(row)) for i, row in enumerate(plan.rows)]
        if not self._run(CommandGroup("Paste", tuple(commands))):
            return False
        self.view.reveal(start)
        logger.info("Pasted %d rows (%s)", len(plan.rows), parsed.kind)
        self._set_status(f"Pasted {len(plan.rows)} rows", 2)
        return True

    def paste_from_clipboard(self) -> bool:
        try:
            text = read_clipboard(self.config)
        except EditorError as exc:
            self._report(exc)
            return False
        return self.paste(text)

    def rows_as_tsv(self, indices=None) -> str:
        frame = self.document.to_frame()
        if indices is not None:
            frame = frame.iloc[list(indices)]
        return frame.to_csv(sep="\t", index=False)

    def copy_rows(self, indices=None) -> bool:
        try:
            write_clipboard(self.rows_as_tsv(indices), self.config)
        except EditorError as exc:
            self._report(exc)
            return False
        self._set_status("Copied", 2)
        return True

    # ---------- view ----------
    def set_search(self, query: str):
        self.view.set_query(self.document, query)

    def go_to_page(self, page: int) -> bool:
        return self.view.go_to_page(page)

    def next_page(self):
        self.view.next_page()

    def prev_page(self):
        self.view.prev_page()

    def first_page(self):
        self.view.first_page()

    def last_page(self):
        self.view.last_page()

    def visible(self):
        return self.view.project(self.document)

    # ---------- embedded JSON ----------
    def open_tree_editor(self, row: int, col: int):
        try:
            self.tree = TreeWorkingCopy.from_cell(row, col, self.document.get_cell(row, col))
        except EditorError as exc:
            self._report(exc)
            self.tree = None
        return self.tree

    def tree_edit(self, operation: str, *args):
        """Run one TreeWorkingCopy operation; failures leave the working copy as it was."""
        if operation not in TREE_OPERATIONS:
            raise ValueError(f"Unknown tree operation: {operation}")
        if self.tree is None:
            self._set_status("No cell open for JSON editing", 3)
            return None
        try:
            return getattr(self.tree, operation)(*args)
        except EditorError as exc:
            self._report(exc)
            return None

    def commit_tree(self) -> bool:
        tree = self.tree
        if tree is None:
            return False
        self.tree = None
        return self.edit_cell(tree.row, tree.col, tree.serialize())

    def cancel_tree(self):
        self.tree = None
