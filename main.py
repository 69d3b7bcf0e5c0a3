from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from colorpeek import __version__
from colorpeek.api.v1 import router as v1_router
from colorpeek.config import config
from colorpeek.schemas import HealthResponse

app = FastAPI(
    title="colorpeek",
    description="Deterministic dominant-color palette extraction",
    version=__version__
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins(),
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"]
)

app.include_router(v1_router)


@app.get("/healthz", response_model=HealthResponse)
def health_check():
    """Health check endpoint"""
    return HealthResponse(ok=True, version=__version__, service="colorpeek")


@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": "colorpeek palette API",
        "version": __version__,
        "docs": "/docs"
    }
