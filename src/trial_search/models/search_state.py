"""Search state and pagination for a single /search request."""

import math

from pydantic import BaseModel, Field

from trial_search.models.model_clinical_trials import StudiesPage


class SearchState(BaseModel):
    """
    Query, page cursor, and results of one search request.

    ``next_page`` starts as the page the user asked for. Once the result
    count is known, ``paginate`` computes ``total_pages`` and moves the
    cursor one past the fetched page unless that page was the last one.
    """

    search_key: str = ""
    next_page: int = Field(default=1, ge=1)
    total_pages: int = Field(default=0, ge=0)
    results: StudiesPage | None = None

    def is_last_page(self) -> bool:
        return self.next_page >= self.total_pages

    def current_page(self) -> int:
        if self.next_page == 1:
            return self.next_page
        return self.next_page - 1

    def previous_page(self) -> int:
        return self.current_page() - 1

    def paginate(self, page_size: int) -> None:
        """Compute ``total_pages`` from the results and advance the cursor.

        Uses a true ceiling: 45 results at 20 per page is 3 pages, not the
        2 that truncating the division first would give.
        """
        count = self.results.n_studies_returned if self.results else 0
        self.total_pages = math.ceil(count / page_size)
        if not self.is_last_page():
            self.next_page += 1
