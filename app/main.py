import asyncio
import logging
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from typing import Optional

from app.config import settings
from app.core.dependencies import get_optional_session
from app.modules.session.context import SessionContext
from app.modules.session.registry import get_session_registry, purge_idle_loop
from app.modules.auth import routes as auth_routes
from app.modules.categories import routes as categories_routes
from app.modules.preferences import routes as preferences_routes
from app.modules.feeds import routes as feeds_routes
from app.modules.posts import routes as posts_routes
from app.modules.authors import routes as authors_routes
from app.modules.dashboard import routes as dashboard_routes
from app.modules.debug import routes as debug_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
    return JSONResponse(status_code=500, content={"detail": str(exc)})


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


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Redirect-To"],
)

# Include module routes
app.include_router(auth_routes.router, prefix="/api/v1")
app.include_router(categories_routes.router, prefix="/api/v1")
app.include_router(preferences_routes.router, prefix="/api/v1")
app.include_router(feeds_routes.router, prefix="/api/v1")
app.include_router(posts_routes.router, prefix="/api/v1")
app.include_router(authors_routes.router, prefix="/api/v1")
app.include_router(dashboard_routes.router, prefix="/api/v1")
app.include_router(debug_routes.router, prefix="/api/v1")


@app.on_event("startup")
async def startup_event():
    logger.info("Application startup")
    app.state.purge_task = asyncio.create_task(purge_idle_loop())
    logger.info("Idle session purge started - will check every 5 minutes")


@app.on_event("shutdown")
async def shutdown_event():
    app.state.purge_task.cancel()
    closed = get_session_registry().close_all()
    logger.info(f"Application shutdown, closed {closed} session(s)")


@app.get("/")
async def root(context: Optional[SessionContext] = Depends(get_optional_session)):
    """Entry point: signed-in users go to their feed, everyone else to sign in."""
    return {
        "message": "Welcome to filo",
        "status": "healthy",
        "redirect_to": "/feeds" if context is not None else "/signin",
    }


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    """Readiness probe: extend here with Supabase checks if needed."""
    return {"status": "ready"}
