"""FastAPI application entrypoint for the Compartment Simulation Lab."""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import configure_services, router as api_router
from .api.schemas import HealthResponse
from .config import DEFAULT_SIMULATION_CONFIG, DEFAULT_TELEMETRY_CONFIG
from .telemetry import configure_telemetry

VERSION = "0.1.0"

API_DESCRIPTION = """
Conductance-based, multi-compartment neuron models stepped with an explicit
Euler scheme. The service exposes endpoints to:

* list the bundled ion channel templates (`/channels`)
* list and fetch bundled scene documents (`/scenes`, `/scenes/{name}`)
* run a scene and return sampled voltage traces with spike counts (`/simulate`)
"""


telemetry = configure_telemetry(DEFAULT_TELEMETRY_CONFIG)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    yield
    telemetry.shutdown()


app = FastAPI(title="Compartment Simulation API", description=API_DESCRIPTION, version=VERSION, lifespan=lifespan)
telemetry.instrument_app(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.environ.get("CORS_ORIGINS", "http://localhost:3000").split(","),
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

configure_services(simulation_config=DEFAULT_SIMULATION_CONFIG)
app.include_router(api_router)


@app.get("/", response_model=HealthResponse)
@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    """Liveness probe reporting the API version."""

    return HealthResponse(status="ok", version=VERSION)


__all__ = ["app"]
