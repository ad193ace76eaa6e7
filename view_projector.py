from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from pagination import PAGE_SIZE, Paginator


@dataclass(frozen=True)
class PageInfo:
    page: int
    total_pages: int
    visible_count: int
    total_rows: int
    page_size: int = PAGE_SIZE

    @property
    def start(self) -> int:
        """1-based number of the first visible row on this page (0 when empty)."""
        if self.visible_count == 0:
            return 0
        return self.page * self.page_size + 1

    @property
    def end(self) -> int:
        return min((self.page + 1) * self.page_size, self.visible_count)

    @property
    def label(self) -> str:
        return f"{self.start}-{self.end} of {self.visible_count}"

    @property
    def has_prev(self) -> bool:
        return self.page > 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages - 1


@dataclass(frozen=True)
class ProjectedView:
    visible_rows: List[Tuple[int, list]] = field(default_factory=list)
    page_info: Optional[PageInfo] = None

    @property
    def original_indices(self) -> List[int]:
        return [idx for idx, _ in self.visible_rows]


def row_matches(row, query: str) -> bool:
    if not query:
        return True
    needle = query.lower()
    return any(needle in str(cell).lower() for cell in row)


def filter_indices(rows, query: str) -> List[int]:
    return [i for i, row in enumerate(rows) if row_matches(row, query)]


def project(document, query: str, page: int, page_size: int = PAGE_SIZE) -> ProjectedView:
    """Filter the document rows by ``query`` and cut out one page.

    The page index is clamped into range; rows keep their original index so
    edits always address the underlying document.
    """
    rows = document.rows
    indices = filter_indices(rows, query)
    paginator = Paginator(len(indices), page_size=page_size)
    paginator.set_page(page)
    visible = [(i, rows[i]) for i in indices[paginator.page_start : paginator.page_end]]
    info = PageInfo(
        page=paginator.page_index,
        total_pages=paginator.page_count,
        visible_count=len(indices),
        total_rows=len(rows),
        page_size=page_size,
    )
    return ProjectedView(visible_rows=visible, page_info=info)


def highlight_match(cell, query: str):
    """Split ``cell`` around the first case-insensitive occurrence of ``query``."""
    if not query:
        return None
    text = str(cell)
    pos = text.lower().find(query.lower())
    if pos < 0:
        return None
    end = pos + len(query)
    return text[:pos], text[pos:end], text[end:]


class ViewState:
    """Search query and current page for one session; derived data is rebuilt on refresh."""

    def __init__(self, page_size: int = PAGE_SIZE):
        self.search_query = ""
        self.paginator = Paginator(0, page_size=page_size)
        self.filtered_indices: List[int] = []

    @property
    def current_page(self) -> int:
        return self.paginator.page_index

    @property
    def total_pages(self) -> int:
        return self.paginator.page_count

    @property
    def page_size(self) -> int:
        return self.paginator.page_size

    def refresh(self, document):
        self.filtered_indices = filter_indices(document.rows, self.search_query)
        self.paginator.update_total_rows(len(self.filtered_indices))

    def set_query(self, document, query: str):
        self.search_query = query or ""
        self.paginator.first_page()
        self.refresh(document)

    def go_to_page(self, page: int) -> bool:
        return self.paginator.go_to_page(page)

    def next_page(self):
        self.paginator.next_page()

    def prev_page(self):
        self.paginator.prev_page()

    def first_page(self):
        self.paginator.first_page()

    def last_page(self):
        self.paginator.last_page()

    def reveal(self, original_index: int) -> bool:
        """Move to the page showing ``original_index``; False if it is filtered out."""
        try:
            position = self.filtered_indices.index(original_index)
        except ValueError:
            return False
        self.paginator.ensure_row_visible(position)
        return True

    def project(self, document) -> ProjectedView:
        return project(document, self.search_query, self.current_page, self.page_size)
