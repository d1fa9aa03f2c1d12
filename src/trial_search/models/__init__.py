"""Data models for trial-search."""

from trial_search.models.model_clinical_trials import (
    StudiesPage,
    StudySummary,
    TrialsAPIError,
)
from trial_search.models.search_state import SearchState

__all__ = ["SearchState", "StudiesPage", "StudySummary", "TrialsAPIError"]
