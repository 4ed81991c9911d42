# planning_engine/main.py
import logging

from fastapi import FastAPI

from planning_engine import __version__
from planning_engine.core.config import settings
from planning_engine.features import api

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(title=settings.PROJECT_NAME, version=__version__)

app.include_router(api.api_router, prefix=settings.API_PREFIX)


@app.get("/health")
def health_check():
    return {"status": "healthy"}
