"""
FastAPI application exposing the analysis core.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from eintsofia import __version__
from eintsofia.api.routes.analysis import router as analysis_router
from eintsofia.api.routes.feedback import router as feedback_router
from eintsofia.api.routes.participants import router as participants_router
from eintsofia.api.routes.prompts import router as prompts_router
from eintsofia.api.routes.screening import router as screening_router
from eintsofia.api.schemas import HealthCheckResponse
from eintsofia.infrastructure.config.settings import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Ein Tsofia Analysis API",
    description="Structured video analysis, follow-up analyses and the Emma assistant",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analysis_router)
app.include_router(screening_router)
app.include_router(participants_router)
app.include_router(prompts_router)
app.include_router(feedback_router)


@app.get("/health", response_model=HealthCheckResponse)
async def health_check():
    return HealthCheckResponse(status="healthy", version=__version__)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("eintsofia.api.app:app", host="0.0.0.0", port=8000, reload=True)
