from fastapi import Body

from newsdesk.config import settings
from newsdesk.schemas import PaginationInput


class PaginationParams:
    """
    LIMIT / OFFSET resolved from an optional ``PaginationInput``.

    List procedures accept an omitted body, in which case the defaults
    (``limit=20``, ``offset=0``) apply.

    Attributes
    ----------
    limit:
        Number of rows to return, clamped to ``settings.MAX_PAGE_SIZE``
        regardless of the value supplied by the caller.
    offset:
        Number of rows to skip.
    """

    def __init__(self, pagination: PaginationInput | None = None) -> None:
        pagination = pagination or PaginationInput()
        self.limit = min(pagination.limit, settings.MAX_PAGE_SIZE)
        self.offset = pagination.offset


def optional_pagination(
    pagination: PaginationInput | None = Body(None),
) -> PaginationInput | None:
    """FastAPI dependency: the request body of a list procedure, if any."""
    return pagination
