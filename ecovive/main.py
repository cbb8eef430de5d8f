# ecovive/main.py
import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from ecovive import __version__
from ecovive.api import catalog, reports, users
from ecovive.config import settings
from ecovive.database import Base, engine

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Create database tables
Base.metadata.create_all(bind=engine)

# Initialize FastAPI app
app = FastAPI(title="EcoVive API", version=__version__)

# Ensure the uploads directory exists before mounting it
UPLOAD_DIR = Path(settings.UPLOAD_DIR)
UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
app.mount(settings.UPLOAD_BASE_URL, StaticFiles(directory=str(UPLOAD_DIR)), name="uploads")

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routers
app.include_router(users.router)    # /users/*
app.include_router(reports.router)  # /reports/*
app.include_router(catalog.router)  # /catalog/*


@app.get("/health")
def health_check():
    return {
        "status": "healthy",
        "message": "EcoVive API is running",
        "version": __version__,
    }


@app.get("/debug/routes")
def list_routes():
    """List all registered routes for debugging."""
    routes = []
    for route in app.routes:
        if hasattr(route, "methods"):
            routes.append({
                "path": route.path,
                "methods": list(route.methods),
                "name": route.name,
            })
    return {"routes": routes}


logger.info("EcoVive API started (env=%s)", settings.APP_ENV)
