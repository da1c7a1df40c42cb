from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .config import settings
from .database import engine, Base
from .routers import quotes, companies, pricing_config
from .settings_integration import SettingsCache

logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("paintquote")
logger.setLevel(settings.LOG_LEVEL.upper())

# Create tables (handles new tables but won't add columns to existing ones)
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="PaintQuote",
    description="Painting contractor quote pricing engine",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Resolved company settings, shared by every request
app.state.settings_cache = SettingsCache(ttl_seconds=settings.SETTINGS_CACHE_SECONDS)

# API routes
app.include_router(quotes.router, prefix="/api")
app.include_router(companies.router, prefix="/api")
app.include_router(pricing_config.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": "paintquote"}


@app.on_event("startup")
def log_startup():
    logger.info("%s pricing service started (settings cache %ss)",
                settings.COMPANY_NAME, settings.SETTINGS_CACHE_SECONDS)
