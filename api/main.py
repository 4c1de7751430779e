# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-07
# Updated: 2026-10-12
# Description: main.py
# -----------------------------------------------------------------------------
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from api.AppContainer import app_container
from api.routers import cases, health

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Model load happens once, before the first request is served
    await app_container.startup()
    yield


app = FastAPI(title="HR Case Match API", lifespan=lifespan)
app.include_router(health.router)
app.include_router(cases.router)
