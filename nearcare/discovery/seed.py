import os
from typing import List

import yaml

from nearcare.core.models import Facility

# ------------------------------------------------------------------------------
# Load bundled catalog data
# ------------------------------------------------------------------------------
CATALOG_FILE = os.path.join(os.path.dirname(__file__), "..", "facility_catalog.yaml")
with open(CATALOG_FILE, "r", encoding="utf-8") as f:
    CATALOG = yaml.safe_load(f)

OVERPASS_CATEGORIES: List[str] = CATALOG.get("overpass_categories", [])
FACILITY_TYPES: List[str] = CATALOG.get("facility_types", [])
TYPE_LABELS: dict = CATALOG.get("type_labels", {})

SEED_FACILITIES: List[Facility] = [
    Facility.model_validate(item) for item in CATALOG.get("seed_facilities", [])
]


def seed_facilities() -> List[Facility]:
    """Bundled fallback list, used before any search and when fetches fail."""
    return [f.model_copy(deep=True) for f in SEED_FACILITIES]
