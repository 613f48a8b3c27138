import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import models  # noqa: F401
from .constants import (
    AVAILABILITY_LABELS,
    CATEGORY_DESCRIPTIONS,
    CATEGORY_LABELS,
    CONTRACT_STATUS_LABELS,
    EXPERT_CATEGORY_GROUPS,
    LOCATIONS,
    PROJECT_STATUS_LABELS,
    PROPOSAL_STATUS_LABELS,
    SORT_LABELS,
    category_group,
)
from .database import Base, engine
from .domain.contracts import router as contracts_router
from .domain.dashboard import router as dashboard_router
from .domain.experts import router as experts_router
from .domain.messages import router as messages_router
from .domain.notifications import router as notifications_router
from .domain.payments import router as payments_router
from .domain.projects import router as projects_router
from .domain.proposals import router as proposals_router
from .domain.reviews import router as reviews_router
from .domain.uploads import router as uploads_router
from .domain.users import router as users_router
from .schemas import MarketplaceMetaResponse
from .security_headers import SecurityHeadersMiddleware

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        # Ignore "already exists" errors from race conditions between workers
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="Sewn API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Convert 422 validation errors from HTTPBearer to 401 authentication errors
    when the issue is with the Authorization header
    """
    for error in exc.errors():
        if error.get("loc") and "authorization" in str(error.get("loc")).lower():
            logger.warning(
                f"Authentication failed for {request.url.path}: Missing or invalid Authorization header"
            )
            return JSONResponse(
                status_code=401,
                content={
                    "detail": "Not authenticated. Please provide a valid Bearer token in the Authorization header."
                },
            )

    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(exc.errors())})


ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
    expose_headers=["X-Token-Expired", "Retry-After"],
)

if SECURITY_HEADERS_ENABLED:
    app.add_middleware(SecurityHeadersMiddleware, exclude_paths=["/health"])
    logger.info("Security headers middleware enabled")

app.include_router(users_router)
app.include_router(experts_router)
app.include_router(projects_router)
app.include_router(proposals_router)
app.include_router(contracts_router)
app.include_router(reviews_router)
app.include_router(payments_router)
app.include_router(messages_router)
app.include_router(notifications_router)
app.include_router(dashboard_router)
app.include_router(uploads_router)


@app.get("/")
async def root():
    return {"message": "Sewn API", "status": "running"}


@app.get("/health")
async def health():
    return {"status": "healthy"}


@app.get("/meta/categories", response_model=MarketplaceMetaResponse)
async def get_marketplace_meta():
    """Category catalog, filter options and status labels for the frontend"""
    return {
        "categories": [
            {
                "value": value,
                "label": label,
                "description": CATEGORY_DESCRIPTIONS.get(value, ""),
                "group": category_group(value),
            }
            for value, label in CATEGORY_LABELS.items()
        ],
        "groups": [
            {"key": key, "label": group["label"], "categories": group["categories"]}
            for key, group in EXPERT_CATEGORY_GROUPS.items()
        ],
        "sortOptions": SORT_LABELS,
        "statusLabels": {
            "availability": AVAILABILITY_LABELS,
            "project": PROJECT_STATUS_LABELS,
            "proposal": PROPOSAL_STATUS_LABELS,
            "contract": CONTRACT_STATUS_LABELS,
        },
        "locations": list(LOCATIONS),
    }
