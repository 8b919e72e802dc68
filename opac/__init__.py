"""
OPAC-Package für die Katalogsuche in SISIS-WebOPAC-Bibliotheken.

Dieses Package enthält:
- Die Extraktion von Trefferlisten und Detailseiten (`parsers`)
- Die Datenmodelle (`MediaRecord`, `DetailedMediaRecord`, `ItemAvailability`)
- Den HTTP-Client (`OPACService`) und die Suchanfragen (`SearchQuery`)
"""

from .availability import AvailabilityStatus, classify
from .config import LibraryConfig, config_from_env, default_library_config, load_library_config
from .errors import OPACError
from .models import DetailedMediaRecord, ItemAvailability, MediaRecord, SessionData
from .parsers import extract_session_data, parse_availability, parse_detailed_media_info, parse_search_results
from .query import SearchCategory, SearchOperator, SearchQuery, SearchTerm, SortOrder
from .search import OPACService

__all__ = [
    "AvailabilityStatus",
    "classify",
    "LibraryConfig",
    "config_from_env",
    "default_library_config",
    "load_library_config",
    "OPACError",
    "DetailedMediaRecord",
    "ItemAvailability",
    "MediaRecord",
    "SessionData",
    "extract_session_data",
    "parse_availability",
    "parse_detailed_media_info",
    "parse_search_results",
    "SearchCategory",
    "SearchOperator",
    "SearchQuery",
    "SearchTerm",
    "SortOrder",
    "OPACService",
]
