"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware

from kinchart.config import settings
from kinchart.routes import (
    active_member,
    auth,
    catalog,
    diagnoses,
    documents,
    family,
    medical_tests,
    onboarding,
    profile,
    storage,
    visits,
)
from kinchart.services.member_context import MemberContextRegistry

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        # Prevent clickjacking
        response.headers["X-Frame-Options"] = "DENY"
        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Permissions-Policy"] = "geolocation=(), microphone=()"
        return response


app = FastAPI(
    title="KinChart",
    description="Family health records: diagnoses, visits, tests and documents per family member",
    version="0.1.0",
)

# One session provider and active-member store per signed-in account
app.state.member_contexts = MemberContextRegistry()

# Security headers middleware (applied to all responses)
app.add_middleware(SecurityHeadersMiddleware)

# Parse comma-separated origins from config
_cors_origins = [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Last resort for database errors not reported by a route."""
    logger.exception("Unhandled database error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Something went wrong"})


# Include API routers
app.include_router(auth.router, prefix="/api")
app.include_router(onboarding.router, prefix="/api")
app.include_router(profile.router, prefix="/api")
app.include_router(active_member.router, prefix="/api")
app.include_router(family.router, prefix="/api")
app.include_router(diagnoses.router, prefix="/api")
app.include_router(visits.router, prefix="/api")
app.include_router(medical_tests.router, prefix="/api")
app.include_router(documents.router, prefix="/api")
app.include_router(catalog.router, prefix="/api")
app.include_router(storage.router)


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
async def root() -> dict:
    """Root endpoint with API info."""
    return {
        "name": "KinChart API",
        "version": "0.1.0",
        "docs": "/docs",
    }
