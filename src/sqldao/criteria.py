"""
Page request and sort directives.
"""
from dataclasses import dataclass, field
from typing import Self

from sqldao.exceptions import QueryError

SORT_DIRECTIONS = ('ASC', 'DESC')


def sort_direction(column: str, direction: str | None) -> str:
    """Normalize a sort direction, rejecting anything but ASC or DESC."""
    direction = (direction or 'ASC').strip().upper()
    if direction not in SORT_DIRECTIONS:
        raise QueryError(f'Unknown sort direction {direction!r} for {column}')
    return direction


@dataclass
class Criteria:
    """Paging and sorting options for a query.

    Paging is active only when both `page` and `size` are set. Pages are
    1-based; a page of zero or less is treated as the first page.
    """
    page: int | None = None
    size: int | None = None
    order_by_column: str | None = None
    sorts: dict[str, str] = field(default_factory=dict)

    @property
    def is_null_paging(self) -> bool:
        return self.page is None or self.size is None

    @property
    def is_not_null_paging(self) -> bool:
        return not self.is_null_paging

    @property
    def is_count_query(self) -> bool:
        return self.page is None or self.page <= 1

    @property
    def is_empty_sort(self) -> bool:
        return not self.sorts

    @property
    def row_start(self) -> int:
        """Zero-based index of the first row on the page."""
        if self.is_null_paging:
            raise QueryError('row window requires both page and size')
        if self.page <= 0:
            self.page = 1
        return (self.page - 1) * self.size

    @property
    def mysql_offset(self) -> int:
        return self.row_start

    @property
    def mssql_offset(self) -> int:
        return self.row_start

    @property
    def oracle_row_start(self) -> int:
        """One-based ROWNUM of the first row on the page."""
        return self.row_start + 1

    @property
    def oracle_row_end(self) -> int:
        """One-based ROWNUM of the last row on the page."""
        return self.row_start + self.size

    def add_sort(self, column: str, direction: str = 'ASC') -> Self:
        self.sorts[column] = sort_direction(column, direction)
        return self

    def set_paging_and_sorting(self, criteria: 'Criteria | None') -> None:
        """Copy page, size and sorts from another criteria."""
        if criteria is None:
            return
        self.sorts = criteria.sorts
        self.size = criteria.size
        self.page = criteria.page
