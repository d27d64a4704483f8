from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from backend import config
from backend.routers import models, planet

app = FastAPI(
    title="PlanetBuilder API",
    description="Backend API for the PlanetBuilder procedural planet generator",
    version="0.1.0",
)

# ---------------------------------------------------------------------------
# CORS -- origins of the planet viewer (PLANETBUILDER_CORS_ORIGINS)
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(planet.router)
app.include_router(models.router)

# ---------------------------------------------------------------------------
# Static files -- serve exported GLB assets
# ---------------------------------------------------------------------------
config.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
app.mount("/output", StaticFiles(directory=str(config.OUTPUT_DIR)), name="output")


@app.get("/")
async def root():
    return {"status": "ok", "service": "PlanetBuilder API"}
