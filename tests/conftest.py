"""Pytest configuration and fixtures."""

import json
from unittest.mock import AsyncMock

import pytest

from trial_search.config import Settings
from trial_search.data_sources.base_client import UpstreamResponse
from trial_search.data_sources.clinical_trials import ClinicalTrialsClient


def make_full_study(
    title: str,
    org: str = "National Cancer Institute (NCI)",
    status: str = "Recruiting",
    start_date: str = "March 2020",
    nct_id: str | None = "NCT04375669",
) -> dict:
    """Build one FullStudies entry in the upstream shape."""
    ident = {
        "Organization": {"OrgFullName": org},
        "BriefTitle": title,
    }
    if nct_id:
        ident["NCTId"] = nct_id
    return {
        "Study": {
            "ProtocolSection": {
                "IdentificationModule": ident,
                "StatusModule": {
                    "OverallStatus": status,
                    "StartDateStruct": {"StartDate": start_date},
                },
            }
        }
    }


def make_full_studies_body(n_returned: int, n_studies: int | None = None) -> str:
    """Serialized full_studies response with ``n_studies`` entries."""
    count = n_returned if n_studies is None else n_studies
    studies = [
        make_full_study(f"Study {i}", nct_id=f"NCT{i:08d}") for i in range(1, count + 1)
    ]
    return json.dumps(
        {
            "FullStudiesResponse": {
                "NStudiesFound": 1234,
                "NStudiesReturned": n_returned,
                "FullStudies": studies,
            }
        }
    )


@pytest.fixture
def settings() -> Settings:
    """Settings with defaults, independent of the environment."""
    return Settings(
        _env_file=None,
        page_size=20,
        max_rank=30,
        upstream_base_url="https://clinicaltrials.gov/api/query/full_studies",
    )


@pytest.fixture
def stub_client():
    """Factory for a ClinicalTrialsClient whose HTTP layer returns a canned response."""

    def _make(status: int = 200, body: str = "", side_effect=None) -> ClinicalTrialsClient:
        client = ClinicalTrialsClient()
        if side_effect is not None:
            client._rest_get = AsyncMock(side_effect=side_effect)
        else:
            client._rest_get = AsyncMock(
                return_value=UpstreamResponse(status=status, body=body)
            )
        return client

    return _make


@pytest.fixture
def full_study():
    """Factory for a single upstream FullStudies entry."""
    return make_full_study


@pytest.fixture
def full_studies_body():
    """Factory for a serialized upstream full_studies response."""
    return make_full_studies_body
