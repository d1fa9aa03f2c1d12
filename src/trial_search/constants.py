"""Project-wide constants."""

from pathlib import Path

# -- Package resources ------------------------------------------------------
_PACKAGE_DIR: Path = Path(__file__).parent
TEMPLATES_DIR: Path = _PACKAGE_DIR / "templates"
ASSETS_DIR: Path = _PACKAGE_DIR / "assets"
INDEX_TEMPLATE: str = "index.html"

# -- Server defaults --------------------------------------------------------
DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 3000

# -- ClinicalTrials.gov (legacy full_studies endpoint) ----------------------
CLINICAL_TRIALS_BASE_URL: str = "https://clinicaltrials.gov/api/query/full_studies"
CLINICAL_TRIALS_PAGE_SIZE: int = 20
# Sent upstream as max_rnk; deliberately not tied to the page size.
CLINICAL_TRIALS_MAX_RANK: int = 30
CLINICAL_TRIALS_LANGUAGE: str = "en"
DEFAULT_TIMEOUT: float = 30.0

# -- Response bodies ----------------------------------------------------------
INVALID_PAGE_MESSAGE: str = "Invalid page parameter"
UNEXPECTED_ERROR_MESSAGE: str = "Unexpected server error"
