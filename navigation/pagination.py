# backend/navigation/pagination.py
"""Relay-style cursor pagination over Django querysets."""
import base64
import binascii
from dataclasses import dataclass, field

from django.conf import settings

from .exceptions import InvalidPaginationArguments

CURSOR_PREFIX = "offset:"


def offset_to_cursor(offset: int) -> str:
    return base64.b64encode(f"{CURSOR_PREFIX}{offset}".encode()).decode("ascii")


def cursor_to_offset(cursor: str) -> int:
    try:
        decoded = base64.b64decode(cursor.encode("ascii"), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeError, AttributeError) as exc:
        raise InvalidPaginationArguments(f"Invalid cursor: {cursor!r}") from exc

    if not decoded.startswith(CURSOR_PREFIX):
        raise InvalidPaginationArguments(f"Invalid cursor: {cursor!r}")
    try:
        offset = int(decoded[len(CURSOR_PREFIX):])
    except ValueError as exc:
        raise InvalidPaginationArguments(f"Invalid cursor: {cursor!r}") from exc
    if offset < 0:
        raise InvalidPaginationArguments(f"Invalid cursor: {cursor!r}")
    return offset


@dataclass
class Page:
    edges: list = field(default_factory=list)  # [(cursor, node), ...]
    total_count: int = 0
    has_next_page: bool = False
    has_previous_page: bool = False

    @property
    def nodes(self):
        return [node for _, node in self.edges]

    @property
    def start_cursor(self):
        return self.edges[0][0] if self.edges else None

    @property
    def end_cursor(self):
        return self.edges[-1][0] if self.edges else None


def paginate(queryset, first=None, last=None, after=None, before=None) -> Page:
    """
    Slice an ordered queryset the way a Relay connection does.

    Without `first`/`last` the first NAVIGATION_DEFAULT_PAGE_SIZE rows
    are returned.
    """
    max_size = getattr(settings, "NAVIGATION_MAX_PAGE_SIZE", 50)

    if first is not None and last is not None:
        raise InvalidPaginationArguments("Use either first or last, not both.")
    for name, value in (("first", first), ("last", last)):
        if value is None:
            continue
        if value < 0:
            raise InvalidPaginationArguments(f"{name} must not be negative.")
        if value > max_size:
            raise InvalidPaginationArguments(f"{name} must not exceed {max_size}.")
    if first is None and last is None:
        first = getattr(settings, "NAVIGATION_DEFAULT_PAGE_SIZE", 20)

    total = queryset.count()

    start = cursor_to_offset(after) + 1 if after else 0
    end = cursor_to_offset(before) if before else total
    start = min(start, total)
    end = max(start, min(end, total))

    if first is not None:
        end = min(end, start + first)
    if last is not None:
        start = max(start, end - last)

    rows = list(queryset[start:end])
    return Page(
        edges=[(offset_to_cursor(start + index), row) for index, row in enumerate(rows)],
        total_count=total,
        has_next_page=end < total,
        has_previous_page=start > 0,
    )
