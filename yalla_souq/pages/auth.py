"""Site routes for signup, login, the auth callback and email verification."""

from urllib.parse import urlencode

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import RedirectResponse

from yalla_souq.api.dependencies import get_current_session
from yalla_souq.api.schemas import (
    AuthResultResponse,
    LoginLinkResponse,
    LoginRequest,
    ResetPasswordRequest,
    SignupPageResponse,
    SignupRequest,
    VerifyEmailResponse,
)
from yalla_souq.auth import errors
from yalla_souq.auth.manager import AuthManager
from yalla_souq.auth.schemas import AuthErrorInfo, AuthUser, Session, SignupData
from yalla_souq.core.di_container import DIContainer
from yalla_souq.core.exceptions import AuthProviderError, ValidationError
from yalla_souq.core.logging import AppLogger
from yalla_souq.core.validators import validate_login, validate_signup

router = APIRouter(prefix="/auth", tags=["auth"])

LOGIN_PATH = "/auth/login"
CALLBACK_PROVIDER_ERROR = "حدث خطأ أثناء تسجيل الدخول"
CALLBACK_UNEXPECTED_ERROR = "حدث خطأ غير متوقع"
CALLBACK_SUCCESS = "تم تسجيل الدخول بنجاح"
EMAIL_VERIFIED = "تم تأكيد البريد الإلكتروني بنجاح! 🎉"
EMAIL_VERIFIED_LOGIN_MESSAGE = "تم تأكيد البريد الإلكتروني، يمكنك تسجيل الدخول الآن"
FORM_INVALID = "يرجى تصحيح الأخطاء في النموذج"


def with_query(path: str, **params: str) -> str:
    """Append URL-encoded query parameters to a site path."""
    return f"{path}?{urlencode(params)}" if params else path


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)


def _auth_result(
    response: Response,
    auth: AuthManager,
    success: bool,
    error: AuthErrorInfo | None = None,
    redirect_to: str | None = None,
    failure_status: int = status.HTTP_400_BAD_REQUEST,
) -> AuthResultResponse:
    if not success:
        response.status_code = failure_status
    return AuthResultResponse(success=success, error=error, redirect_to=redirect_to, state=auth.state)


@router.get("/signup", response_model=None)
@inject
async def signup_page(
    email_confirmed: str | None = None,
    session: Session | None = Depends(get_current_session),  # noqa: B008
    app_logger: AppLogger = Depends(Provide[DIContainer.app_logger]),  # noqa: B008
) -> RedirectResponse | SignupPageResponse:
    """Signup page. Visitors who already have a session go to the dashboard."""
    if session is not None:
        app_logger.info("User already logged in, redirecting to dashboard", None, "SignupPage")
        return _redirect("/dashboard")

    confirmed = email_confirmed == "true"
    if confirmed:
        app_logger.info("Email confirmed successfully", None, "SignupPage")
    return SignupPageResponse(email_confirmed=confirmed)


@router.post("/signup", response_model=AuthResultResponse)
@inject
async def signup(
    request: SignupRequest,
    response: Response,
    auth: AuthManager = Depends(Provide[DIContainer.auth_manager]),  # noqa: B008
    app_logger: AppLogger = Depends(Provide[DIContainer.app_logger]),  # noqa: B008
) -> AuthResultResponse:
    """Create an account and name the page to open next.

    Confirmed accounts continue to profile setup; unconfirmed ones to the
    verify-email page.
    """
    field_errors = validate_signup(request.model_dump())
    if field_errors:
        raise ValidationError(FORM_INVALID, fields=field_errors)

    result = await auth.signup(
        SignupData(
            email=request.email,
            password=request.password,
            first_name=request.first_name,
            last_name=request.last_name,
            phone=request.phone,
            accept_terms=request.accept_terms,
            receive_newsletter=request.receive_newsletter,
        )
    )
    if not result.success or not isinstance(result.user, AuthUser):
        return _auth_result(response, auth, False, result.error)

    user = result.user
    if user.email_confirmed_at:
        app_logger.info("Signup successful, email already confirmed", {"userId": user.id}, "SignupPage")
        redirect_to = "/profile/setup"
    else:
        app_logger.info("Signup successful, email verification required", {"userId": user.id}, "SignupPage")
        redirect_to = with_query("/auth/verify-email", email=user.email)
    return _auth_result(response, auth, True, redirect_to=redirect_to)


@router.get("/signup/login-link", response_model=LoginLinkResponse)
async def login_link(redirect: str | None = None) -> LoginLinkResponse:
    """Login route for the "already have an account" link, keeping ``redirect``."""
    if redirect:
        return LoginLinkResponse(href=with_query(LOGIN_PATH, redirect=redirect))
    return LoginLinkResponse(href=LOGIN_PATH)


@router.post("/login", response_model=AuthResultResponse)
@inject
async def login(
    request: LoginRequest,
    response: Response,
    auth: AuthManager = Depends(Provide[DIContainer.auth_manager]),  # noqa: B008
) -> AuthResultResponse:
    field_errors = validate_login(request.model_dump())
    if field_errors:
        raise ValidationError(FORM_INVALID, fields=field_errors)

    result = await auth.login(request.email, request.password, request.remember_me)
    if not result.success:
        failure_status = status.HTTP_429_TOO_MANY_REQUESTS if auth.is_blocked else status.HTTP_401_UNAUTHORIZED
        return _auth_result(response, auth, False, result.error, failure_status=failure_status)
    return _auth_result(response, auth, True, redirect_to="/")


@router.post("/logout", response_model=AuthResultResponse)
@inject
async def logout(
    response: Response,
    auth: AuthManager = Depends(Provide[DIContainer.auth_manager]),  # noqa: B008
) -> AuthResultResponse:
    await auth.logout()
    return _auth_result(response, auth, True, redirect_to="/")


@router.post("/reset-password", response_model=AuthResultResponse)
@inject
async def reset_password(
    request: ResetPasswordRequest,
    response: Response,
    auth: AuthManager = Depends(Provide[DIContainer.auth_manager]),  # noqa: B008
) -> AuthResultResponse:
    result = await auth.reset_password(request.email)
    return _auth_result(response, auth, result.success, result.error)


@router.get("/state")
@inject
async def auth_state(
    auth: AuthManager = Depends(Provide[DIContainer.auth_manager]),  # noqa: B008
) -> dict:
    """Current auth state with the derived display name and permissions."""
    return {
        "state": auth.state.model_dump(),
        "display_name": auth.get_display_name(),
        "permissions": {
            name: auth.has_permission(name) for name in ("post_ad", "business_features", "admin_panel")
        },
    }


@router.get("/callback")
@inject
async def auth_callback(
    auth: AuthManager = Depends(Provide[DIContainer.auth_manager]),  # noqa: B008
    app_logger: AppLogger = Depends(Provide[DIContainer.app_logger]),  # noqa: B008
) -> RedirectResponse:
    """Finish an external sign-in and send the visitor on."""
    try:
        session = await auth.provider.get_session()
    except AuthProviderError as e:
        app_logger.error("Auth callback error", e, "AuthCallback")
        return _redirect(with_query(LOGIN_PATH, error=CALLBACK_PROVIDER_ERROR))
    except Exception as e:
        app_logger.error("Unexpected error", e, "AuthCallback")
        return _redirect(with_query(LOGIN_PATH, error=CALLBACK_UNEXPECTED_ERROR))

    if session is not None:
        return _redirect(with_query("/", success=CALLBACK_SUCCESS))
    return _redirect(LOGIN_PATH)


@router.get("/verify-email", response_model=VerifyEmailResponse)
@inject
async def verify_email(
    response: Response,
    token_hash: str | None = None,
    type: str | None = None,  # noqa: A002
    email: str | None = None,
    auth: AuthManager = Depends(Provide[DIContainer.auth_manager]),  # noqa: B008
) -> VerifyEmailResponse:
    """Confirm an emailed link, or acknowledge that one was sent."""
    if token_hash and type:
        result = await auth.verify_email(token_hash, type)
        if result.success:
            return VerifyEmailResponse(
                status="verified",
                message=EMAIL_VERIFIED,
                redirect_to=with_query(LOGIN_PATH, message=EMAIL_VERIFIED_LOGIN_MESSAGE),
            )
        response.status_code = status.HTTP_400_BAD_REQUEST
        return VerifyEmailResponse(status="error", message=result.error.message if result.error else "")

    if email:
        return VerifyEmailResponse(status="link_sent", message=f"تم إرسال رابط التأكيد إلى {email}", email=email)

    response.status_code = status.HTTP_400_BAD_REQUEST
    return VerifyEmailResponse(status="error", message=errors.VERIFY_LINK_INVALID)
