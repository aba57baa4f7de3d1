import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sentry_sdk.integrations.fastapi import FastApiIntegration
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.routes import checkout as checkout_routes
from .api.utils import METHOD_NOT_ALLOWED, reject, validation_message
from .errors import CheckoutError
from .health import health_checker
from .logging_config import configure_structlog, get_logger
from .metrics import PrometheusMiddleware, get_metrics
from .settings import settings
from .utils import add_cors, add_request_id_tracing, add_security_headers

# Configure structured logging (must be done before any logging calls)
configure_structlog(json_logs=not settings.DEBUG)

if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.SENTRY_ENVIRONMENT,
        release=settings.SENTRY_RELEASE or "zero26-checkout@dev",
        integrations=[FastApiIntegration()],
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        send_default_pii=False,
    )

app = FastAPI(
    title="Zero26 Checkout API",
    version="0.1.0",
    description="Ticket quotes, gateway orders and payment verification",
)
add_cors(app)
add_security_headers(app)
add_request_id_tracing(app)
app.add_middleware(PrometheusMiddleware)

API_PREFIX = "/v1"
LEGACY_API_PREFIX = "/api"

logger = get_logger(__name__)


@app.middleware("http")
async def legacy_prefix_upgrade(request: Request, call_next):  # type: ignore[override]
    """Serve the legacy ``/api/<route>`` paths from the versioned router."""
    path = request.scope.get("path", "")
    if not path.startswith(LEGACY_API_PREFIX + "/"):
        return await call_next(request)

    new_path = API_PREFIX + path[len(LEGACY_API_PREFIX) :]
    request.scope["path"] = new_path
    query = request.scope.get("query_string", b"")
    raw_path = new_path.encode()
    if query:
        raw_path = raw_path + b"?" + query
    request.scope["raw_path"] = raw_path
    response = await call_next(request)
    response.headers.setdefault("X-API-Version", "v1")
    return response


app.include_router(checkout_routes.router, prefix=API_PREFIX)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 405:
        response = reject(METHOD_NOT_ALLOWED, status_code=405)
        if exc.headers:
            response.headers.update(exc.headers)
        return response
    return reject(str(exc.detail), status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return reject(validation_message(request.url.path, exc.errors()))


@app.exception_handler(CheckoutError)
async def checkout_error_handler(request: Request, exc: CheckoutError) -> JSONResponse:
    return reject(exc.message)


@app.get("/health")
def health():
    """Return service health including gateway configuration."""
    status = health_checker.check_all()
    status_code = 200 if status["status"] == "healthy" else 503
    body = {
        "status": status["status"],
        "timestamp": status.get("timestamp"),
        "checks": status.get("checks", {}),
        "service": "zero26-checkout",
        "version": "0.1.0",
    }
    return JSONResponse(content=body, status_code=status_code)


@app.get("/metrics")
def metrics():
    """Expose Prometheus metrics."""
    return get_metrics()
