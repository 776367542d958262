"""
FastAPI application entry point.

Run with: uvicorn api.main:app --reload
"""
import logging
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables from backend/.env (optional) before other imports that read env
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(env_path)

from api.envelope import install_exception_handlers
from api.routes import cafes, google_maps
from db import init_db

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


# Create app
app = FastAPI(
    title="Coffeemode API",
    description="Cafe directory with Google Maps place resolution",
    version="0.1.0",
)

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure properly for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_exception_handlers(app)

# Include routers
app.include_router(cafes.router, prefix="/api/cafes", tags=["cafes"])
app.include_router(google_maps.router, prefix="/api/google-maps", tags=["google-maps"])


@app.on_event("startup")
def startup_event():
    """Initialize database tables on startup."""
    init_db()


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "Coffeemode API"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
