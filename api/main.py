"""
FastAPI Backend dla silnika Precious Materials.

Endpoints:
    GET  /api/health             - health check
    GET  /api/materials          - lista materiałów
    GET  /api/materials/{slug}   - tabela efektów materiału
    GET  /api/actions            - lista akcji
    GET  /api/actions/{key}      - definicja akcji
    POST /api/preview            - reguły/akcje/ostrzeżenia dla opisu itema
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from api.routers import materials, actions, preview


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown events."""
    print("🚀 Precious Materials API starting...")
    yield
    print("👋 Precious Materials API shutting down...")


app = FastAPI(
    title="Precious Materials API",
    description="Material effect tables and rule preview for the Precious Materials engine",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS - allow all origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(materials.router, prefix="/api", tags=["Materials"])
app.include_router(actions.router, prefix="/api", tags=["Actions"])
app.include_router(preview.router, prefix="/api", tags=["Preview"])


@app.get("/api/health")
async def health():
    """API health check."""
    return {"status": "healthy"}
