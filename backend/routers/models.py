import logging
from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse

from backend import config
from backend.jobs import job_manager
from backend.models import ExportedPlanet

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/models", tags=["models"])


def _export_path(filename: str):
    path = config.OUTPUT_DIR / filename
    if path.suffix != ".glb" or path.resolve().parent != config.OUTPUT_DIR.resolve():
        return None
    return path if path.is_file() else None


def _describe(path) -> ExportedPlanet:
    """Describe an exported planet file.

    Files written by this process carry the snapshot version, settings and
    prop counts of their export job; older files only have file metadata.
    """
    stat = path.stat()
    record = job_manager.exports.get(path.name, {})
    return ExportedPlanet(
        filename=path.name,
        model_url=f"/output/{path.name}",
        size_bytes=stat.st_size,
        modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
        version=record.get("version"),
        settings=record.get("settings"),
        instances=record.get("instances"),
    )


@router.get("", response_model=List[ExportedPlanet])
async def list_models():
    """Exported planets in the output directory, newest first."""
    if not config.OUTPUT_DIR.exists():
        return []
    planets = [_describe(p) for p in config.OUTPUT_DIR.glob("*.glb")]
    planets.sort(key=lambda p: p.modified, reverse=True)
    return planets


@router.get("/{filename}")
async def get_model(filename: str):
    """Serve an exported planet GLB.

    The ``X-Planet-Version`` header names the snapshot it was exported
    from when that is known.
    """
    path = _export_path(filename)
    if path is None:
        raise HTTPException(status_code=404, detail="Planet export not found")

    headers = {}
    version = job_manager.exports.get(path.name, {}).get("version")
    if version is not None:
        headers["X-Planet-Version"] = str(version)
    return FileResponse(path=str(path), media_type="model/gltf-binary",
                        filename=path.name, headers=headers)
