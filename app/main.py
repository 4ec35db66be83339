import logging
from urllib.parse import urlparse

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from app.api.exception_handlers import register_exception_handlers
from app.api.v1.router import api_router
from app.core.config import settings
from app.domain.membership import MembershipPolicy, default_registry
from app.domain.tokens import TokenPolicy

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Yacht Club Membership API")

if settings.frontend_url:
    parsed = urlparse(settings.frontend_url)
    origin = f"{parsed.scheme}://{parsed.netloc}"
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# The tier table is read-only; routes receive these through app.api.deps.
registry = default_registry()
app.state.membership_policy = MembershipPolicy(registry)
app.state.token_policy = TokenPolicy(registry, hours_per_token=settings.hours_per_token)
logger.info(
    "Loaded %s membership tiers; %s hours per token",
    len(registry.profiles()),
    settings.hours_per_token,
)

register_exception_handlers(app)
app.include_router(api_router, prefix="/api/v1")


@app.get("/health")
def health():
    return {"status": "ok"}
