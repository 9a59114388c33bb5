"""Regions, cities and currencies shown in listing forms."""

from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class City:
    id: str
    name: str
    name_en: str
    is_capital: bool = False
    country: str | None = None


@dataclass(frozen=True)
class Region:
    id: str
    name: str
    name_en: str
    cities: tuple[City, ...]


@dataclass(frozen=True)
class Currency:
    code: str
    symbol: str
    name: str
    name_en: str
    is_primary: bool = False


PALESTINIAN_REGIONS: MappingProxyType[str, Region] = MappingProxyType(
    {
        "WEST_BANK": Region(
            id="west-bank",
            name="الضفة الغربية",
            name_en="West Bank",
            cities=(
                City("jerusalem", "القدس", "Jerusalem", is_capital=True),
                City("ramallah", "رام الله", "Ramallah"),
                City("bethlehem", "بيت لحم", "Bethlehem"),
                City("hebron", "الخليل", "Hebron"),
                City("nablus", "نابلس", "Nablus"),
                City("jenin", "جنين", "Jenin"),
                City("tulkarm", "طولكرم", "Tulkarm"),
                City("qalqilya", "قلقيلية", "Qalqilya"),
                City("salfit", "سلفيت", "Salfit"),
                City("jericho", "أريحا", "Jericho"),
                City("tubas", "طوباس", "Tubas"),
            ),
        ),
        "GAZA_STRIP": Region(
            id="gaza-strip",
            name="قطاع غزة",
            name_en="Gaza Strip",
            cities=(
                City("gaza", "غزة", "Gaza"),
                City("khan-younis", "خان يونس", "Khan Younis"),
                City("rafah", "رفح", "Rafah"),
                City("deir-al-balah", "دير البلح", "Deir al-Balah"),
                City("north-gaza", "شمال غزة", "North Gaza"),
            ),
        ),
        "DIASPORA": Region(
            id="diaspora",
            name="الشتات الفلسطيني",
            name_en="Palestinian Diaspora",
            cities=(
                City("amman", "عمان", "Amman", country="الأردن"),
                City("beirut", "بيروت", "Beirut", country="لبنان"),
                City("damascus", "دمشق", "Damascus", country="سوريا"),
                City("cairo", "القاهرة", "Cairo", country="مصر"),
                City("other", "أخرى", "Other"),
            ),
        ),
    }
)

CURRENCIES: tuple[Currency, ...] = (
    Currency("ILS", "₪", "شيكل", "Israeli Shekel", is_primary=True),
    Currency("USD", "$", "دولار أمريكي", "US Dollar"),
    Currency("EUR", "€", "يورو", "Euro"),
    Currency("JOD", "د.أ", "دينار أردني", "Jordanian Dinar"),
)


def get_city_by_id(city_id: str) -> City | None:
    for region in PALESTINIAN_REGIONS.values():
        for city in region.cities:
            if city.id == city_id:
                return city
    return None


def get_currency(code: str) -> Currency | None:
    return next((currency for currency in CURRENCIES if currency.code == code), None)
