import logging
import time
import uuid

from fastapi import FastAPI, Request

from ..core.engine import LifecycleEngine
from .errors import register_exception_handlers
from .identity import IdentityResolver, header_identity_resolver
from .routes import auth_router, router

logger = logging.getLogger("whitelist.api")


def create_app(
    engine: LifecycleEngine,
    identity_resolver: IdentityResolver | None = None,
) -> FastAPI:
    """Build the HTTP adapter around ``engine``."""
    app = FastAPI(title="Whitelist Applications API")
    app.state.engine = engine
    app.state.identity_resolver = identity_resolver or header_identity_resolver()

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        """Attach a request id to every response and log a compact access line.

        - If the caller provides X-Request-ID, we reuse it.
        - Otherwise we generate a UUID4.
        """
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id

        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "access request_id=%s method=%s path=%s status=%s duration_ms=%.2f",
            request_id,
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        return response

    register_exception_handlers(app)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    app.include_router(auth_router)
    app.include_router(router, prefix="/api")
    return app
