import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_settings
from app.database import init_db
from app.access.router import router as access_router
from app.onboarding.router import router as onboarding_router
from app.review.admin_router import router as review_admin_router
from shared.middleware.request_id import request_id_middleware
from shared.middleware.error_handler import (
    error_envelope_middleware,
    http_exception_envelope_handler,
)

logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s: %(message)s")
logger = logging.getLogger(__name__)


# ── OpenAPI metadata ──────────────────────────────────────────────────────────

_DESCRIPTION = """
## NurseLink Onboarding Service

Owns nurse onboarding and the platform-access rules that depend on it:

* **Profile completion** — three ordered steps (basic information, verification
  documents, professional profile), each saved independently. A step can only be
  saved once every earlier step is complete.
* **Submission** — a completed profile is submitted once for admin review; a second
  submission is refused while the first is pending or under review.
* **Access status** — capability flags, redirect target and next required action for
  the authenticated nurse. Other services apply the same decision through the
  `require_access` dependency.
* **Admin review** — queue of submitted profiles, approve / reject / request changes,
  internal notes and a per-submission action log.

### Authentication
All endpoints except `/health` require:
```
Authorization: Bearer <access_token>
```
Admin endpoints additionally require the `admin` role in the token.

### Error shape
All errors return a consistent JSON envelope:
```json
{ "error": { "code": "sequence_violation", "message": "..." }, "request_id": "..." }
```
Access denials (`403`, code `nurse_access_denied`) also carry `redirect_to`,
`next_required_action` and, where relevant, `current_step` inside `error`.
"""

_TAGS_METADATA = [
    {
        "name": "Nurse Profile",
        "description": (
            "Three-step profile completion and submission for review. "
            "Step 1: `POST /step1` — basic information. "
            "Step 2: `POST /step2` — license and verification documents. "
            "Step 3: `POST /step3` — certifications, skills and education. "
            "Then `POST /submit`."
        ),
    },
    {
        "name": "Access",
        "description": (
            "Where the authenticated nurse may go. Used by the frontend to route "
            "unfinished or unapproved nurses back to onboarding."
        ),
    },
    {
        "name": "admin-profile-review",
        "description": (
            "**Admin only.** Review submitted nurse profiles. The outcome is applied to "
            "the profile and the account in the same transaction."
        ),
    },
]


# ── Health schema ─────────────────────────────────────────────────────────────

class HealthResponse(BaseModel):
    status: str
    service: str


# ── App factory ───────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    init_db(settings.onboarding_database_url)
    logger.info("Onboarding service started (env=%s)", settings.env_name)
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="NurseLink Onboarding Service",
        version="1.0.0",
        description=_DESCRIPTION,
        openapi_tags=_TAGS_METADATA,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # HTTPExceptions are answered by the router before http middleware sees them,
    # so the envelope is applied by an exception handler as well.
    app.add_exception_handler(StarletteHTTPException, http_exception_envelope_handler)

    # Middleware is applied in reverse-registration order (last added = outermost).
    # CORS must be outermost so every response carries CORS headers.
    app.middleware("http")(error_envelope_middleware)
    app.middleware("http")(request_id_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )

    app.include_router(onboarding_router, prefix=settings.api_prefix)
    app.include_router(access_router, prefix=settings.api_prefix)
    app.include_router(review_admin_router, prefix=settings.api_prefix)

    @app.get("/health", response_model=HealthResponse, tags=["health"], include_in_schema=True)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service="onboarding")

    return app


app = create_app()
