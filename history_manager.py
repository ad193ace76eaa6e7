from typing import List, Optional

from logger import get_logger

logger = get_logger(__name__)

MAX_HISTORY = 50


class HistoryManager:
    """Linear undo/redo log of commands with a bounded depth.

    ``cursor`` is the index of the last applied command (-1 when nothing is
    applied). The manager only moves the cursor; the caller applies or reverts
    the returned command against the document.
    """

    def __init__(self, max_items: int = MAX_HISTORY):
        self.max_items = max_items
        self.entries: List = []
        self.cursor = -1

    def push(self, command) -> None:
        # a new edit abandons the redo branch
        if self.cursor < len(self.entries) - 1:
            del self.entries[self.cursor + 1 :]
        self.entries.append(command)
        self.cursor += 1

        while len(self.entries) > self.max_items:
            evicted = self.entries.pop(0)
            self.cursor = max(-1, self.cursor - 1)
            logger.debug("History full, evicted %s", type(evicted).__name__)

    def undo(self) -> Optional[object]:
        if self.cursor < 0:
            return None
        command = self.entries[self.cursor]
        self.cursor -= 1
        return command

    def redo(self) -> Optional[object]:
        if self.cursor >= len(self.entries) - 1:
            return None
        self.cursor += 1
        return self.entries[self.cursor]

    def clear(self) -> None:
        self.entries = []
        self.cursor = -1

    @property
    def can_undo(self) -> bool:
        return self.cursor >= 0

    @property
    def can_redo(self) -> bool:
        return self.cursor < len(self.entries) - 1

    @property
    def items(self) -> List:
        return list(self.entries)

    def __len__(self) -> int:
        return len(self.entries)
