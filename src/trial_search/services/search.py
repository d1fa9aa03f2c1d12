"""
Search service: turns raw request parameters into a paginated SearchState.

Shared by the /search route and the ``trial-search search`` command.
"""

import logging

from trial_search.data_sources.clinical_trials import ClinicalTrialsClient
from trial_search.models.search_state import SearchState

logger = logging.getLogger(__name__)


class InvalidPageError(ValueError):
    """Raised when the ``page`` parameter is not a positive integer."""

    def __init__(self, raw: str):
        self.raw = raw
        super().__init__(f"Invalid page parameter: {raw!r}")


def parse_page(raw: str | None) -> int:
    """Parse the user-supplied page number; absent or empty means page 1."""
    if raw is None or raw == "":
        return 1
    try:
        page = int(raw)
    except ValueError:
        raise InvalidPageError(raw) from None
    if page < 1:
        raise InvalidPageError(raw)
    return page


async def run_search(
    client: ClinicalTrialsClient,
    search_key: str,
    page: int,
    page_size: int,
) -> SearchState:
    """Fetch one page for ``search_key`` and return its paginated state."""
    logger.info("Search query is: %s", search_key)
    logger.info("Results page is: %d", page)

    search = SearchState(search_key=search_key, next_page=page)
    search.results = await client.search_studies(search_key, search.next_page)
    search.paginate(page_size)

    logger.debug(
        "Paginated search %r: total_pages=%d next_page=%d",
        search_key,
        search.total_pages,
        search.next_page,
    )
    return search
