"""FastAPI application exposing WarPlan predictions and allocation planning."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from .api_routes import router

app = FastAPI(
    title="WarPlan",
    description="Monte Carlo attack outcome estimates and bonus army allocation",
    version=__version__,
)

# Add CORS middleware for development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, prefix="/api")


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok", "service": "warplan"}
