import logging
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from slowapi.errors import RateLimitExceeded

from waitlist.auth.errors import AuthError
from waitlist.core.config import settings, require_jwt_secret
from waitlist.core.rate_limit import limiter
from waitlist.routes.auth import router as auth_router
from waitlist.routes.public import router as public_router
from waitlist.routes.services import router as services_router

logger = logging.getLogger(__name__)

require_jwt_secret()

app = FastAPI(title="Waitlist API")
logger.info(
    "Startup config: ENV=%s google=%s github=%s implicit_social_linking=%s rate_limiting=%s",
    settings.ENV,
    bool(settings.GOOGLE_CLIENT_ID),
    bool(settings.GITHUB_CLIENT_ID),
    settings.ALLOW_IMPLICIT_SOCIAL_LINKING,
    settings.ENABLE_RATE_LIMITING,
)

_ERROR_CODE_BY_STATUS: dict[int, str] = {
    400: "VALIDATION_ERROR",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    409: "CONFLICT",
    422: "VALIDATION_ERROR",
    429: "RATE_LIMITED",
    500: "INTERNAL_ERROR",
}


def _error_code(status_code: int) -> str:
    return _ERROR_CODE_BY_STATUS.get(int(status_code), "HTTP_ERROR")


@app.exception_handler(HTTPException)
def http_exception_handler(request: Request, exc: HTTPException):  # noqa: ARG001
    detail = exc.detail
    message: str
    details: dict | None = None

    if isinstance(detail, str):
        message = detail
    elif isinstance(detail, dict):
        msg = detail.get("message")
        message = msg if isinstance(msg, str) and msg else "Request failed"
        det = detail.get("details")
        details = det if isinstance(det, dict) else None
    else:
        message = str(detail) if detail is not None else "Request failed"

    payload: dict = {"error": _error_code(exc.status_code), "message": message}
    if details:
        payload["details"] = details
    return JSONResponse(status_code=exc.status_code, content=payload, headers=getattr(exc, "headers", None))


@app.exception_handler(AuthError)
def auth_error_handler(request: Request, exc: AuthError):  # noqa: ARG001
    # 401s tell the client to drop whatever token it holds.
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.code, "message": exc.message},
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
def validation_exception_handler(request: Request, exc: RequestValidationError):  # noqa: ARG001
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Invalid request payload",
            "details": {"errors": jsonable_errors(exc)},
        },
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    # pydantic puts the raw exception under ctx["error"] for some validators (e.g. EmailStr).
    errors: list[dict] = []
    for err in exc.errors():
        item = dict(err)
        ctx = item.get("ctx")
        if isinstance(ctx, dict):
            item["ctx"] = {k: str(v) for k, v in ctx.items()}
        errors.append(item)
    return errors


if settings.ENABLE_RATE_LIMITING:
    app.state.limiter = limiter
    # Provide our standard error shape for rate limits, instead of slowapi's default.
    app.add_exception_handler(
        RateLimitExceeded,
        lambda request, exc: JSONResponse(  # noqa: ARG005
            status_code=429,
            content={"error": "RATE_LIMITED", "message": "Too many requests"},
        ),
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(services_router)
app.include_router(public_router)

@app.get("/health")
def health_check():
    return {"status": "ok"}
