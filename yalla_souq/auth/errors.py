"""Arabic translations of auth backend errors and user-facing auth messages."""

from types import MappingProxyType

ERROR_MESSAGES: MappingProxyType[str, str] = MappingProxyType(
    {
        "Invalid login credentials": "بيانات تسجيل الدخول غير صحيحة",
        "User already registered": "هذا البريد الإلكتروني مسجل مسبقاً",
        "Password should be at least 6 characters": "كلمة المرور يجب أن تكون 6 أحرف على الأقل",
        "Invalid email": "البريد الإلكتروني غير صحيح",
        "Email not confirmed": "يرجى تأكيد البريد الإلكتروني أولاً",
        "Too many requests": "محاولات كثيرة، يرجى المحاولة لاحقاً",
        "Network error": "خطأ في الاتصال، تحقق من الإنترنت",
    }
)

LOGIN_BLOCKED = "تم حظر المحاولات لمدة مؤقتة، يرجى المحاولة لاحقاً"
LOGIN_UNEXPECTED = "حدث خطأ غير متوقع أثناء تسجيل الدخول"
MOCK_INVALID_CREDENTIALS = "البريد الإلكتروني أو كلمة المرور غير صحيحة"
TERMS_REQUIRED = "يجب قبول الشروط والأحكام للمتابعة"
SIGNUP_UNEXPECTED = "حدث خطأ غير متوقع أثناء إنشاء الحساب"
NOT_LOGGED_IN = "لم يتم تسجيل الدخول"
PROFILE_UPDATE_FAILED = "فشل في تحديث البيانات"
PASSWORD_RESET_FAILED = "فشل في إرسال رابط إعادة تعيين كلمة المرور"
PROFILE_LOAD_FAILED = "فشل في تحميل بيانات المستخدم"
INIT_FAILED = "فشل في تهيئة نظام المصادقة"
VERIFY_LINK_INVALID = "رابط التأكيد غير صالح"


def get_error_message(error: str) -> str:
    """Translate a backend error message, passing unknown messages through."""
    return ERROR_MESSAGES.get(error, error)
