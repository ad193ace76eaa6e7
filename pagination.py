PAGE_SIZE = 100


def page_count_for(total_rows: int, page_size: int = PAGE_SIZE) -> int:
    """Number of pages for ``total_rows``; an empty result still has one page."""
    if total_rows <= 0:
        return 1
    return -(-total_rows // page_size)


class Paginator:
    """Current page over a row count that changes as rows are added or filtered."""

    def __init__(self, total_rows: int, page_size: int = PAGE_SIZE):
        if page_size < 1:
            raise ValueError("page_size must be positive")
        self.page_size = page_size
        self.total_rows = max(0, total_rows)
        self.page_index = 0

    @property
    def page_count(self) -> int:
        return page_count_for(self.total_rows, self.page_size)

    @property
    def last_index(self) -> int:
        return self.page_count - 1

    @property
    def page_start(self) -> int:
        return self.page_index * self.page_size

    @property
    def page_end(self) -> int:
        return min(self.total_rows, self.page_start + self.page_size)

    def _clamped(self, page_index: int) -> int:
        return min(max(page_index, 0), self.last_index)

    def update_total_rows(self, total_rows: int):
        self.total_rows = max(0, total_rows)
        self.page_index = self._clamped(self.page_index)

    # ---------- movement ----------
    def set_page(self, page_index: int):
        self.page_index = self._clamped(page_index)

    def go_to_page(self, page_index: int) -> bool:
        """Jump to ``page_index``; out-of-range requests leave the page unchanged."""
        if self._clamped(page_index) != page_index:
            return False
        self.page_index = page_index
        return True

    def next_page(self):
        self.set_page(self.page_index + 1)

    def prev_page(self):
        self.set_page(self.page_index - 1)

    def first_page(self):
        self.page_index = 0

    def last_page(self):
        self.page_index = self.last_index

    def ensure_row_visible(self, position: int):
        """Move to the page holding the row at ``position`` in the paged sequence."""
        self.set_page(max(position, 0) // self.page_size)
