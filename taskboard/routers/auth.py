"""Authentication API router."""

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from taskboard.config import Settings
from taskboard.deps import AppSettings, CurrentUserId, DbSession
from taskboard.logger import get_logger, log_exception
from taskboard.models import User
from taskboard.rate_limit import RateLimiter
from taskboard.schemas import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UserResponse,
)
from taskboard.security import hash_password, issue_token, verify_password
from taskboard.utils import (
    raise_bad_request,
    raise_internal_error,
    raise_too_many_requests,
    raise_unauthorized,
)

router = APIRouter(prefix="/auth", tags=["auth"])
logger = get_logger(__name__)

USER_EXISTS = "User already exists"
INVALID_CREDENTIALS = "Invalid credentials"


def _get_client_ip(request: Request, settings: Settings) -> str:
    """Extract client IP from request, considering proxies.

    NOTE: X-Forwarded-For is only trusted when TRUST_PROXY=true to prevent
    IP spoofing attacks that could bypass rate limiting.
    """
    if settings.trust_proxy:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            # Take the first IP (original client)
            return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _check_rate_limit(request: Request, settings: Settings, limiter: RateLimiter, error_msg: str) -> None:
    """Check rate limit and raise HTTPException if exceeded."""
    if not request.app.state.rate_limiters.enabled:
        return
    allowed, retry_after = limiter.is_allowed(_get_client_ip(request, settings))
    if not allowed:
        raise_too_many_requests(error_msg, retry_after=retry_after)


@router.post("/register", response_model=RegisterResponse)
async def register(
    request: Request,
    data: RegisterRequest,
    db: DbSession,
    settings: AppSettings,
) -> RegisterResponse:
    """Register a new user with email and password."""
    limiters = request.app.state.rate_limiters
    _check_rate_limit(
        request,
        settings,
        limiters.register,
        "Too many registration attempts. Please try again later.",
    )

    try:
        result = await db.execute(select(User.id).where(User.email == data.email))
        if result.scalar_one_or_none() is not None:
            raise_bad_request(USER_EXISTS)

        user = User(
            email=data.email,
            hashed_password=await run_in_threadpool(hash_password, data.password),
        )
        db.add(user)
        try:
            await db.commit()
        except IntegrityError as exc:
            # Another request registered the same email between lookup and insert
            await db.rollback()
            raise_bad_request(USER_EXISTS, cause=exc)
        await db.refresh(user)
    except SQLAlchemyError as exc:
        log_exception(logger, exc, "Registration failed")
        raise_internal_error(cause=exc)

    logger.info("User registered", user_id=str(user.id))
    limiters.register.reset(_get_client_ip(request, settings))
    return RegisterResponse(token=issue_token(user.id, settings))


@router.post("/login", response_model=LoginResponse)
async def login(
    request: Request,
    data: LoginRequest,
    db: DbSession,
    settings: AppSettings,
) -> LoginResponse:
    """Login with email and password."""
    limiters = request.app.state.rate_limiters
    _check_rate_limit(
        request,
        settings,
        limiters.login,
        "Too many login attempts. Please try again later.",
    )
    client_ip = _get_client_ip(request, settings)

    try:
        result = await db.execute(select(User).where(User.email == data.email))
        user = result.scalar_one_or_none()
    except SQLAlchemyError as exc:
        log_exception(logger, exc, "Login lookup failed")
        raise_internal_error(cause=exc)

    # Same message for unknown email and wrong password
    if not user or not await run_in_threadpool(verify_password, data.password, user.hashed_password):
        logger.warning("Failed login attempt", client_ip=client_ip)
        raise_bad_request(INVALID_CREDENTIALS)

    logger.info("Successful login", user_id=str(user.id), client_ip=client_ip)
    limiters.login.reset(client_ip)

    return LoginResponse(token=issue_token(user.id, settings))


@router.get("/user", response_model=UserResponse)
async def get_current_user(
    user_id: CurrentUserId,
    db: DbSession,
) -> UserResponse:
    """Get the authenticated user's profile without the password."""
    try:
        result = await db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
    except SQLAlchemyError as exc:
        log_exception(logger, exc, "Current user lookup failed", user_id=str(user_id))
        raise_internal_error(cause=exc)

    if not user:
        raise_unauthorized("User not found")

    return UserResponse.model_validate(user)
