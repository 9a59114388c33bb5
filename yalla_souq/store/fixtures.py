"""Seed data for the in-memory marketplace.

Categories and users are static reference data. Ads are built relative to
the store's clock so "2 days ago" stays 2 days ago on every restart.
"""

from datetime import datetime, timedelta

from yalla_souq.store.models import Ad, Category, MockUser

CATEGORIES: tuple[dict, ...] = (
    {"id": "1", "name": "مركبات", "name_en": "Vehicles", "slug": "vehicles", "icon": "🚗", "color": "bg-blue-500", "sort_order": 1},
    {"id": "2", "name": "عقارات", "name_en": "Real Estate", "slug": "real-estate", "icon": "🏠", "color": "bg-green-500", "sort_order": 2},
    {"id": "3", "name": "إلكترونيات", "name_en": "Electronics", "slug": "electronics", "icon": "📱", "color": "bg-purple-500", "sort_order": 3},
    {"id": "4", "name": "أزياء", "name_en": "Fashion", "slug": "fashion", "icon": "👕", "color": "bg-pink-500", "sort_order": 4},
    {"id": "5", "name": "أثاث منزلي", "name_en": "Home & Furniture", "slug": "home-furniture", "icon": "🏡", "color": "bg-orange-500", "sort_order": 5},
    {"id": "6", "name": "رياضة", "name_en": "Sports", "slug": "sports", "icon": "⚽", "color": "bg-red-500", "sort_order": 6},
    {"id": "7", "name": "كتب", "name_en": "Books", "slug": "books", "icon": "📚", "color": "bg-indigo-500", "sort_order": 7},
    {"id": "8", "name": "خدمات", "name_en": "Services", "slug": "services", "icon": "🔧", "color": "bg-gray-500", "sort_order": 8},
    {"id": "9", "name": "وظائف", "name_en": "Jobs", "slug": "jobs", "icon": "💼", "color": "bg-teal-500", "sort_order": 9},
    {"id": "10", "name": "أخرى", "name_en": "Other", "slug": "other", "icon": "📦", "color": "bg-gray-400", "sort_order": 10},
)

USERS: tuple[dict, ...] = (
    {"id": "1", "first_name": "أحمد", "last_name": "محمد", "is_business_verified": False, "created_at": "2024-01-15T10:00:00Z"},
    {"id": "2", "first_name": "فاطمة", "last_name": "أحمد", "is_business_verified": True, "created_at": "2024-01-10T08:00:00Z"},
    {"id": "3", "first_name": "محمد", "last_name": "خالد", "is_business_verified": False, "created_at": "2024-01-20T14:00:00Z"},
    {"id": "4", "first_name": "سارة", "last_name": "علي", "is_business_verified": True, "created_at": "2024-01-05T12:00:00Z"},
)

# (created days ago, updated days ago, expires in days) per ad id
_AD_AGES = {
    "1": (2, 0, 28),
    "2": (5, 1, 25),
    "3": (1, 0, 29),
    "4": (3, 1, 27),
    "5": (4, 2, 26),
    "6": (6, 3, 24),
}

_ADS: tuple[dict, ...] = (
    {
        "id": "1",
        "user_id": "1",
        "title": "آيفون 14 برو ماكس للبيع",
        "description": "آيفون 14 برو ماكس 256 جيجا، لون ذهبي، حالة ممتازة جداً. استعمال خفيف لمدة 6 أشهر فقط. يأتي مع الشاحن والعلبة الأصلية وواقي الشاشة. البطارية 95%.",
        "category_id": "3",
        "price": 4200,
        "currency": "ILS",
        "price_type": "negotiable",
        "city": "رام الله",
        "region": "ramallah",
        "ad_type": "sell",
        "condition_type": "used",
        "is_featured": True,
        "is_urgent": False,
        "contact_name": "أحمد محمد",
        "contact_phone": "0598765432",
        "contact_email": "ahmed.mohammad@example.com",
        "contact_method": ["phone", "email"],
        "views_count": 87,
        "favorites_count": 12,
        "messages_count": 5,
        "is_business_ad": False,
        "is_favorited": False,
    },
    {
        "id": "2",
        "user_id": "2",
        "title": "سيارة تويوتا كامري 2019 فل كامل",
        "description": "سيارة تويوتا كامري موديل 2019، فل كامل المواصفات. ماشية 45 ألف كيلو فقط. تأمين شامل ساري حتى نهاية العام. جير أوتوماتيك، فتحة سقف، كاميرا خلفية.",
        "category_id": "1",
        "price": 18500,
        "currency": "USD",
        "price_type": "fixed",
        "city": "نابلس",
        "region": "nablus",
        "ad_type": "sell",
        "condition_type": "used",
        "is_featured": False,
        "is_urgent": True,
        "contact_name": "فاطمة أحمد",
        "contact_phone": "0569876543",
        "contact_method": ["phone"],
        "views_count": 156,
        "favorites_count": 23,
        "messages_count": 8,
        "is_business_ad": True,
        "is_favorited": True,
    },
    {
        "id": "3",
        "user_id": "3",
        "title": "شقة للإيجار في البيرة - 3 غرف",
        "description": "شقة مفروشة للإيجار في البيرة، الطابق الثالث. تتكون من 3 غرف نوم، صالة كبيرة، مطبخ مجهز بالكامل، حمامين. موقع ممتاز قريب من الجامعات والمواصلات.",
        "category_id": "2",
        "price": 600,
        "currency": "USD",
        "price_type": "fixed",
        "city": "البيرة",
        "region": "ramallah",
        "ad_type": "rent",
        "is_featured": True,
        "is_urgent": True,
        "contact_name": "محمد خالد",
        "contact_phone": "0597654321",
        "contact_method": ["phone"],
        "views_count": 98,
        "favorites_count": 17,
        "messages_count": 6,
        "is_business_ad": False,
        "is_favorited": False,
    },
    {
        "id": "4",
        "user_id": "4",
        "title": "لابتوب HP Pavilion للبيع",
        "description": "لابتوب HP Pavilion، معالج Intel Core i7 الجيل العاشر، ذاكرة 16 جيجا رام، هارد SSD 512 جيجا. كارت شاشة منفصل NVIDIA GTX 1650. مناسب للألعاب والبرمجة.",
        "category_id": "3",
        "price": 2800,
        "currency": "ILS",
        "price_type": "negotiable",
        "city": "بيت لحم",
        "region": "bethlehem",
        "ad_type": "sell",
        "condition_type": "used",
        "is_featured": False,
        "is_urgent": False,
        "contact_name": "سارة علي",
        "contact_phone": "0587654321",
        "contact_method": ["phone"],
        "views_count": 45,
        "favorites_count": 8,
        "messages_count": 3,
        "is_business_ad": True,
        "is_favorited": False,
    },
    {
        "id": "5",
        "user_id": "1",
        "title": "طقم صالون مودرن للبيع",
        "description": "طقم صالون مودرن مكون من كنبة 3 مقاعد + كنبتين مفردتين + طاولة وسط رخام. لون بيج فاتح، قماش عالي الجودة. حالة ممتازة، السبب في البيع: السفر.",
        "category_id": "5",
        "price": 1500,
        "currency": "USD",
        "price_type": "negotiable",
        "city": "الخليل",
        "region": "hebron",
        "ad_type": "sell",
        "condition_type": "used",
        "is_featured": False,
        "is_urgent": False,
        "contact_name": "أحمد محمد",
        "contact_phone": "0598765432",
        "contact_method": ["phone"],
        "views_count": 67,
        "favorites_count": 11,
        "messages_count": 4,
        "is_business_ad": False,
        "is_favorited": False,
    },
    {
        "id": "6",
        "user_id": "2",
        "title": "كتب جامعية - كلية الهندسة",
        "description": "مجموعة كتب جامعية لكلية الهندسة، تخصص مدني. تشمل: الرياضيات الهندسية، الفيزياء، الإنشاءات، المساحة. حالة جيدة جداً، مع الملاحظات والتلخيصات.",
        "category_id": "7",
        "price": 200,
        "currency": "ILS",
        "price_type": "fixed",
        "city": "جنين",
        "region": "jenin",
        "ad_type": "sell",
        "condition_type": "used",
        "is_featured": False,
        "is_urgent": False,
        "contact_name": "فاطمة أحمد",
        "contact_phone": "0569876543",
        "contact_method": ["phone"],
        "views_count": 23,
        "favorites_count": 4,
        "messages_count": 2,
        "is_business_ad": False,
        "is_favorited": False,
    },
)


def build_categories() -> list[Category]:
    return [Category(**row) for row in CATEGORIES]


def build_users() -> list[MockUser]:
    return [MockUser(**row) for row in USERS]


def build_ads(now: datetime, categories: list[Category], users: list[MockUser]) -> list[Ad]:
    """Build the seed ads with timestamps relative to ``now``."""
    categories_by_id = {category.id: category for category in categories}
    users_by_id = {user.id: user for user in users}

    ads = []
    for row in _ADS:
        created, updated, expires = _AD_AGES[row["id"]]
        ads.append(
            Ad(
                **row,
                status="active",
                created_at=now - timedelta(days=created),
                updated_at=now - timedelta(days=updated),
                expires_at=now + timedelta(days=expires),
                category=categories_by_id.get(row["category_id"]),
                user=users_by_id.get(row["user_id"]),
            )
        )
    return ads
