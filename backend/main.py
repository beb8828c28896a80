"""SeedForge Backend — FastAPI application entry point."""

import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.routes import generate, library
from backend.middleware.rate_limit import RateLimitMiddleware

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


app = FastAPI(
    title="SeedForge API",
    description="Custom hardware header generator for Daisy Seed builds",
    version="0.1.0",
)

# CORS — allow frontend origins
_frontend_url = os.getenv("FRONTEND_URL")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[_frontend_url] if _frontend_url else [],
    allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Rate limiting — general and generation-specific requests per minute
app.add_middleware(
    RateLimitMiddleware,
    requests_per_minute=int(os.getenv("RATE_LIMIT_PER_MINUTE", "60")),
    generate_requests_per_minute=int(os.getenv("GENERATE_RATE_LIMIT_PER_MINUTE", "20")),
    trust_forwarded_for=os.getenv("TRUST_FORWARDED_FOR", "false").lower() in ("1", "true", "yes"),
)

# Register route modules
app.include_router(generate.router, prefix="/api", tags=["Generate"])
app.include_router(library.router, prefix="/api", tags=["Library"])


@app.get("/api/health")
async def health_check():
    return {"status": "healthy", "service": "seedforge-backend"}
