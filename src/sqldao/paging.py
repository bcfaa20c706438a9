"""
Paged query result.
"""
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from sqldao.criteria import Criteria

T = TypeVar('T')


@dataclass
class Paging(Generic[T]):
    """One page of items plus the totals needed to render a pager.
    """
    items: list[T] = field(default_factory=list)
    total_elements: int = 0
    total_pages: int = 0
    is_first: bool = True
    is_last: bool = False
    criteria: Criteria | None = None

    @property
    def page_no(self) -> int:
        if self.criteria is None or self.criteria.page is None:
            return 1
        return max(self.criteria.page, 1)

    @property
    def page_size(self) -> int:
        if self.criteria is None or self.criteria.size is None:
            return 0
        return self.criteria.size

    @property
    def item_size(self) -> int:
        return len(self.items)

    def add_item(self, item: T | None) -> None:
        if item is None:
            return
        self.items.append(item)

    def calculate_total_page(self) -> None:
        """Derive page count and first/last flags from the totals.

        With no rows or no criteria there is nothing to page through:
        zero pages, first but not last.
        """
        if not self.total_elements or self.criteria is None:
            self.total_pages = 0
            self.is_first = True
            self.is_last = False
            return

        size = self.page_size
        self.total_pages = -(-self.total_elements // size) if size > 0 else 0
        self.is_first = self.page_no == 1
        self.is_last = self.page_no >= self.total_pages
