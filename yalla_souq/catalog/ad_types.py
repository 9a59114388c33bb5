"""Transaction types offered per category on the post-ad wizard."""

from dataclasses import asdict, dataclass, field
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True)
class AdSubType:
    id: str
    title: str
    icon: str
    description: str


@dataclass(frozen=True)
class AdTypeOption:
    type: str
    title: str
    description: str
    icon: str
    sub_types: tuple[AdSubType, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def find_sub_type(self, sub_type_id: str) -> AdSubType | None:
        return next((sub for sub in self.sub_types if sub.id == sub_type_id), None)


def _sub(id_: str, title: str, icon: str, description: str) -> AdSubType:
    return AdSubType(id=id_, title=title, icon=icon, description=description)


_WANTED = "مطلوب للشراء"

_VEHICLES = (
    AdTypeOption(
        type="sell",
        title="بيع مركبة",
        description="بيع سيارة، دراجة نارية، أو أي مركبة",
        icon="🚗",
        sub_types=(
            _sub("car_sell", "بيع سيارة", "🚗", "سيارات خاصة للبيع"),
            _sub("motorcycle_sell", "بيع دراجة نارية", "🏍️", "دراجات نارية للبيع"),
            _sub("truck_sell", "بيع شاحنة", "🚛", "شاحنات وآليات ثقيلة"),
            _sub("parts_sell", "بيع قطع غيار", "🔧", "قطع غيار ومستلزمات"),
        ),
    ),
    AdTypeOption(
        type="rent",
        title="تأجير مركبة",
        description="تأجير سيارة، باص، أو أي مركبة",
        icon="🚕",
        sub_types=(
            _sub("car_rent", "تأجير سيارة", "🚕", "سيارات للإيجار اليومي أو الشهري"),
            _sub("bus_rent", "تأجير باص", "🚌", "باصات للرحلات والمناسبات"),
            _sub("truck_rent", "تأجير شاحنة", "🚛", "شاحنات للنقل والشحن"),
        ),
    ),
    AdTypeOption(
        type="buy",
        title=_WANTED,
        description="البحث عن مركبة للشراء",
        icon="🔍",
        sub_types=(
            _sub("car_buy", "مطلوب سيارة", "🚗", "البحث عن سيارة للشراء"),
            _sub("motorcycle_buy", "مطلوب دراجة نارية", "🏍️", "البحث عن دراجة نارية"),
        ),
    ),
    AdTypeOption(
        type="service",
        title="خدمات السيارات",
        description="خدمات صيانة وإصلاح",
        icon="🔧",
        sub_types=(
            _sub("repair_service", "خدمة إصلاح", "🔧", "خدمات إصلاح وصيانة"),
            _sub("wash_service", "خدمة غسيل", "🚿", "خدمات غسيل وتنظيف"),
            _sub("towing_service", "خدمة سحب", "🚗", "خدمات سحب المركبات"),
        ),
    ),
)

_REAL_ESTATE = (
    AdTypeOption(
        type="sell",
        title="بيع عقار",
        description="بيع شقة، منزل، أرض أو محل",
        icon="🏠",
        sub_types=(
            _sub("apartment_sell", "بيع شقة", "🏢", "شقق سكنية للبيع"),
            _sub("house_sell", "بيع منزل", "🏠", "منازل وفلل للبيع"),
            _sub("land_sell", "بيع أرض", "🌍", "أراضي للبيع"),
            _sub("shop_sell", "بيع محل تجاري", "🏪", "محلات ومكاتب تجارية"),
        ),
    ),
    AdTypeOption(
        type="rent",
        title="تأجير عقار",
        description="تأجير شقة، منزل، مكتب أو محل",
        icon="🏘️",
        sub_types=(
            _sub("apartment_rent", "تأجير شقة", "🏢", "شقق سكنية للإيجار"),
            _sub("house_rent", "تأجير منزل", "🏠", "منازل وفلل للإيجار"),
            _sub("office_rent", "تأجير مكتب", "🏢", "مكاتب للإيجار"),
            _sub("shop_rent", "تأجير محل", "🏪", "محلات تجارية للإيجار"),
        ),
    ),
    AdTypeOption(
        type="buy",
        title=_WANTED,
        description="البحث عن عقار للشراء",
        icon="🔍",
        sub_types=(_sub("property_buy", "مطلوب عقار", "🏠", "البحث عن عقار للشراء"),),
    ),
)

_ELECTRONICS = (
    AdTypeOption(
        type="sell",
        title="بيع جهاز إلكتروني",
        description="بيع هاتف، حاسوب، أو أي جهاز إلكتروني",
        icon="📱",
        sub_types=(
            _sub("phone_sell", "بيع هاتف", "📱", "هواتف ذكية وعادية"),
            _sub("laptop_sell", "بيع حاسوب محمول", "💻", "حواسيب محمولة للبيع"),
            _sub("tv_sell", "بيع تلفزيون", "📺", "أجهزة تلفزيون وشاشات"),
            _sub("gaming_sell", "بيع ألعاب وأجهزة", "🎮", "أجهزة ألعاب ومستلزماتها"),
        ),
    ),
    AdTypeOption(
        type="buy",
        title=_WANTED,
        description="البحث عن جهاز إلكتروني",
        icon="🔍",
        sub_types=(_sub("electronics_buy", "مطلوب جهاز", "📱", "البحث عن أجهزة إلكترونية"),),
    ),
    AdTypeOption(
        type="service",
        title="خدمات إلكترونية",
        description="إصلاح وصيانة الأجهزة",
        icon="🔧",
        sub_types=(_sub("repair_electronics", "إصلاح الأجهزة", "🔧", "خدمات إصلاح وصيانة"),),
    ),
)

_FASHION = (
    AdTypeOption(
        type="sell",
        title="بيع ملابس وإكسسوارات",
        description="بيع ملابس، أحذية، حقائب وإكسسوارات",
        icon="👕",
        sub_types=(
            _sub("clothes_sell", "بيع ملابس", "👕", "ملابس للرجال والنساء والأطفال"),
            _sub("shoes_sell", "بيع أحذية", "👟", "أحذية رياضية وكلاسيكية"),
            _sub("bags_sell", "بيع حقائب", "👜", "حقائب وحقائب ظهر"),
            _sub("accessories_sell", "بيع إكسسوارات", "💍", "مجوهرات وإكسسوارات"),
        ),
    ),
    AdTypeOption(
        type="buy",
        title=_WANTED,
        description="البحث عن ملابس وإكسسوارات",
        icon="🔍",
        sub_types=(_sub("fashion_buy", "مطلوب ملابس", "👕", "البحث عن ملابس وإكسسوارات"),),
    ),
)

DEFAULT_AD_TYPES = (
    AdTypeOption(type="sell", title="للبيع", description="بيع منتج في هذه الفئة", icon="💰"),
    AdTypeOption(type="buy", title=_WANTED, description="البحث عن منتج في هذه الفئة", icon="🔍"),
    AdTypeOption(type="service", title="خدمة", description="تقديم خدمة في هذه الفئة", icon="🔧"),
)

AD_TYPE_OPTIONS: MappingProxyType[str, tuple[AdTypeOption, ...]] = MappingProxyType(
    {
        "vehicles": _VEHICLES,
        "real-estate": _REAL_ESTATE,
        "electronics": _ELECTRONICS,
        "fashion": _FASHION,
    }
)


def get_ad_type_options(category_slug: str) -> tuple[AdTypeOption, ...]:
    """Options for a category slug, falling back to the generic sell/buy/service set."""
    return AD_TYPE_OPTIONS.get(category_slug, DEFAULT_AD_TYPES)


def find_ad_type(category_slug: str, ad_type: str) -> AdTypeOption | None:
    return next((option for option in get_ad_type_options(category_slug) if option.type == ad_type), None)
