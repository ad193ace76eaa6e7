"""Reversible edit commands recorded by the command history.

Each command knows how to apply itself to a ``DocumentStore`` and how to
revert that application exactly. Commands are frozen once built.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class EditCell:
    row: int
    col: int
    old_val: str
    new_val: str

    label = "Edit cell"

    def apply(self, store):
        store.set_cell(self.row, self.col, self.new_val)

    def revert(self, store):
        store.set_cell(self.row, self.col, self.old_val)


@dataclass(frozen=True)
class AddRow:
    index: int
    row_data: tuple

    label = "Add row"

    def apply(self, store):
        store.insert_row(self.index, list(self.row_data))

    def revert(self, store):
        store.remove_row(self.index)


@dataclass(frozen=True)
class DeleteRow:
    index: int
    row_data: tuple

    label = "Delete row"

    def apply(self, store):
        store.remove_row(self.index)

    def revert(self, store):
        store.insert_row(self.index, list(self.row_data))


@dataclass(frozen=True)
class AddColumn:
    index: int
    name: str

    label = "Add column"

    def apply(self, store):
        store.insert_column(self.index, self.name)

    def revert(self, store):
        store.remove_column(self.index)


@dataclass(frozen=True)
class DeleteColumn:
    index: int
    name: str
    column_data: tuple

    label = "Delete column"

    def apply(self, store):
        store.remove_column(self.index)

    def revert(self, store):
        # insert_column rejects a column_data/row count mismatch before mutating
        store.insert_column(self.index, self.name, list(self.column_data))


@dataclass(frozen=True)
class RenameColumn:
    index: int
    old_name: str
    new_name: str

    label = "Rename column"

    def apply(self, store):
        store.rename_header(self.index, self.new_name)

    def revert(self, store):
        store.rename_header(self.index, self.old_name)


@dataclass(frozen=True)
class CommandGroup:
    label: str
    commands: tuple = field(default_factory=tuple)

    def apply(self, store):
        with store.deferred_types():
            done = []
            try:
                for command in self.commands:
                    command.apply(store)
                    done.append(command)
            except Exception:
                for command in reversed(done):
                    command.revert(store)
                raise

    def revert(self, store):
        with store.deferred_types():
            done = []
            try:
                for command in reversed(self.commands):
                    command.revert(store)
                    done.append(command)
            except Exception:
                for command in reversed(done):
                    command.apply(store)
                raise


Command = EditCell | AddRow | DeleteRow | AddColumn | DeleteColumn | RenameColumn | CommandGroup
