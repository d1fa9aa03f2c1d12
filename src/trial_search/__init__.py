"""trial-search: a small web front-end for ClinicalTrials.gov searches."""

__version__ = "0.1.0"
