"""
ClinicalTrials.gov full-studies API client.

One method:
  search_studies: free-text expression + page number → StudiesPage

This module is the only place that knows the shape of the upstream JSON.
Everything past it works with the flat models in model_clinical_trials.
"""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import urlencode

from pydantic import ValidationError

from trial_search.constants import (
    CLINICAL_TRIALS_BASE_URL,
    CLINICAL_TRIALS_LANGUAGE,
    CLINICAL_TRIALS_MAX_RANK,
    CLINICAL_TRIALS_PAGE_SIZE,
)
from trial_search.data_sources.base_client import (
    BaseClient,
    ClientConfig,
    MalformedResponseError,
    RequestContext,
    UpstreamAPIError,
    UpstreamErrorBodyError,
)
from trial_search.models.model_clinical_trials import (
    StudiesPage,
    StudySummary,
    TrialsAPIError,
)


class ClinicalTrialsClient(BaseClient):
    """Client for the ClinicalTrials.gov ``query/full_studies`` endpoint."""

    def __init__(
        self,
        base_url: str = CLINICAL_TRIALS_BASE_URL,
        page_size: int = CLINICAL_TRIALS_PAGE_SIZE,
        max_rank: int = CLINICAL_TRIALS_MAX_RANK,
        config: ClientConfig | None = None,
    ) -> None:
        super().__init__(config)
        self.base_url = base_url
        self.page_size = page_size
        self.max_rank = max_rank

    @property
    def _source_name(self) -> str:
        return "clinical_trials"

    # ------------------------------------------------------------------
    # Public: search_studies
    # ------------------------------------------------------------------

    async def search_studies(self, expr: str, page: int) -> StudiesPage:
        """Fetch one page of studies matching ``expr``.

        Raises UpstreamAPIError when the API reports an error, and
        UpstreamErrorBodyError / MalformedResponseError when it answers
        with something that cannot be decoded.
        """
        url = self.build_search_url(expr, page)
        context = RequestContext(
            source=self._source_name,
            method="search_studies",
            params={"expr": expr, "page": page},
        )
        resp = await self._rest_get(url, context=context)

        if resp.status != 200:
            error = self._parse_error(resp.body, resp.status)
            raise UpstreamAPIError(
                self._source_name, error.message, status_code=resp.status
            )

        try:
            data = json.loads(resp.body)
        except ValueError as e:
            raise MalformedResponseError(
                self._source_name, f"Response is not JSON: {e}", status_code=200
            ) from e

        return self._parse_studies_page(data)

    # ------------------------------------------------------------------
    # URL building
    # ------------------------------------------------------------------

    def build_search_url(self, expr: str, page: int) -> str:
        """Return the full upstream URL; ``expr`` is query-escaped."""
        params: dict[str, Any] = {
            "expr": expr,
            "max_rnk": self.max_rank,
            "fmt": "JSON",
            "pageSize": self.page_size,
            "page": page,
            "language": CLINICAL_TRIALS_LANGUAGE,
        }
        return f"{self.base_url}?{urlencode(params)}"

    # ------------------------------------------------------------------
    # Parsers: API response → Pydantic models
    # ------------------------------------------------------------------

    def _parse_error(self, body: str, status: int) -> TrialsAPIError:
        try:
            return TrialsAPIError.model_validate_json(body)
        except ValidationError as e:
            raise UpstreamErrorBodyError(
                self._source_name,
                f"HTTP {status} with undecodable error body: {body[:200]}",
                status_code=status,
            ) from e

    def _parse_studies_page(self, data: Any) -> StudiesPage:
        try:
            response = _as_object(data, "response")
            response = _as_object(
                response.get("FullStudiesResponse"), "FullStudiesResponse"
            )
            returned = _as_int(response.get("NStudiesReturned"), "NStudiesReturned")
            found = response.get("NStudiesFound")
            if found is not None:
                found = _as_int(found, "NStudiesFound")
            full_studies = response.get("FullStudies")
            if full_studies is None:
                full_studies = []
            elif not isinstance(full_studies, list):
                raise ValueError("FullStudies is not an array")
            studies = [self._parse_study(s) for s in full_studies]
        except ValueError as e:
            raise MalformedResponseError(
                self._source_name, f"Undecodable response: {e}", status_code=200
            ) from e

        return StudiesPage(
            n_studies_returned=returned,
            n_studies_found=found,
            studies=studies,
        )

    @staticmethod
    def _parse_study(full_study: Any) -> StudySummary:
        full_study = _as_object(full_study, "FullStudies entry")
        study = _as_object(full_study.get("Study"), "Study")
        proto = _as_object(study.get("ProtocolSection"), "ProtocolSection")
        ident = _as_object(proto.get("IdentificationModule"), "IdentificationModule")
        status = _as_object(proto.get("StatusModule"), "StatusModule")
        org = _as_object(ident.get("Organization"), "Organization")
        start = _as_object(status.get("StartDateStruct"), "StartDateStruct")

        return StudySummary(
            nct_id=_as_text(ident.get("NCTId"), "NCTId") or None,
            brief_title=_as_text(ident.get("BriefTitle"), "BriefTitle"),
            org_full_name=_as_text(org.get("OrgFullName"), "OrgFullName"),
            overall_status=_as_text(status.get("OverallStatus"), "OverallStatus"),
            start_date=_as_text(start.get("StartDate"), "StartDate"),
        )


# ------------------------------------------------------------------
# JSON field helpers: null decodes to an empty value, a wrong type raises
# ------------------------------------------------------------------


def _as_object(value: Any, field: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{field} is not an object")
    return value


def _as_text(value: Any, field: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{field} is not a string")
    return value


def _as_int(value: Any, field: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{field} is not an integer")
    return value
