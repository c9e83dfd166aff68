import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from quickbom.config import settings
from quickbom.database.supabase_client import create_supabase_client
from quickbom.modules.materials import routes as materials_routes
from quickbom.modules.assembly_categories import routes as assembly_categories_routes
from quickbom.modules.assemblies import routes as assemblies_routes
from quickbom.modules.assembly_groups import routes as assembly_groups_routes
from quickbom.modules.templates import routes as templates_routes
from quickbom.modules.projects import routes as projects_routes
from quickbom.modules.clients import routes as clients_routes
from quickbom.modules.timelines import routes as timelines_routes
from quickbom.modules.backups import routes as backups_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application startup")
    if settings.supabase_url:
        app.state.supabase = create_supabase_client(settings)
    else:
        logger.warning("SUPABASE_URL is not set; database routes will fail until it is configured")
    yield
    logger.info("Application shutdown")


limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
    lifespan=lifespan,
)
app.state.limiter = limiter
app.state.supabase = None
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Structured details (e.g. selection errors) are returned as the body
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "details": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content={"error": "Internal server error"})
    return JSONResponse(status_code=500, content={"error": str(exc)})


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"DENY"),
                    (b"X-XSS-Protection", b"1; mode=block"),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


app.add_middleware(SlowAPIMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include module routes
app.include_router(materials_routes.router, prefix="/api")
app.include_router(assembly_categories_routes.router, prefix="/api")
app.include_router(assemblies_routes.router, prefix="/api")
app.include_router(assembly_groups_routes.router, prefix="/api")
app.include_router(templates_routes.router, prefix="/api")
app.include_router(projects_routes.router, prefix="/api")
app.include_router(clients_routes.router, prefix="/api")
app.include_router(timelines_routes.project_router, prefix="/api")
app.include_router(timelines_routes.router, prefix="/api")
app.include_router(backups_routes.router, prefix="/api")


@app.get("/")
async def root():
    return {"message": "Welcome to quickbom", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    """Readiness check: ready once the Supabase client has been built."""
    if app.state.supabase is None:
        return JSONResponse(status_code=503, content={"status": "not ready"})
    return {"status": "ready"}
