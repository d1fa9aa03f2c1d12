"""
Pydantic models for ClinicalTrials.gov data.

These are the data contracts between the ClinicalTrials.gov client and the web
layer. Templates receive these models; they never see raw API responses.
"""

from pydantic import BaseModel

# ------------------------------------------------------------------
# Study-level models
# ------------------------------------------------------------------


class StudySummary(BaseModel):
    """The fields of a single full-study record that the results page shows."""

    nct_id: str | None = None  # e.g. "NCT04375669"
    brief_title: str = ""
    org_full_name: str = ""  # lead organization
    overall_status: str = ""  # "Recruiting", "Completed", etc.
    start_date: str = ""  # free text as published, e.g. "March 2020"


class StudiesPage(BaseModel):
    """One page of full-study results."""

    n_studies_returned: int = 0
    n_studies_found: int | None = None
    studies: list[StudySummary] = []


# ------------------------------------------------------------------
# Error body
# ------------------------------------------------------------------


class TrialsAPIError(BaseModel):
    """Error body returned by the API alongside a non-200 status.

    Missing fields decode as empty strings.
    """

    status: str = ""
    code: str = ""
    message: str = ""
