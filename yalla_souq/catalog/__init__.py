"""Static reference data: ad types per category, regions and currencies."""

from yalla_souq.catalog.ad_types import AdSubType, AdTypeOption, find_ad_type, get_ad_type_options
from yalla_souq.catalog.regions import CURRENCIES, PALESTINIAN_REGIONS, get_city_by_id, get_currency

__all__ = [
    "AdSubType",
    "AdTypeOption",
    "find_ad_type",
    "get_ad_type_options",
    "CURRENCIES",
    "PALESTINIAN_REGIONS",
    "get_city_by_id",
    "get_currency",
]
