from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .config import settings
from .database import engine, Base
from .routers import leads, clients, estimates, projects

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("designflow")

# Create tables (handles new tables but won't add columns to existing ones)
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title=settings.APP_NAME,
    description="Estimates and project tracking for DesignFlow Studio",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(leads.router, prefix="/api")
app.include_router(clients.router, prefix="/api")
app.include_router(estimates.router, prefix="/api")
app.include_router(projects.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": "designflow-backend"}


@app.on_event("startup")
def log_startup():
    logger.info("%s started (database: %s)", settings.APP_NAME, engine.url.get_backend_name())
