import logging

from fastapi import APIRouter, HTTPException

from planetbuilder import NoPickHit

from backend.jobs import job_manager
from backend.models import (BuffersResponse, ExportRequest, InstanceOut,
                            JobResponse, PickRequest, PickResponse,
                            PlanetSummary, SettingsUpdate)
from backend.session import planet_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/planet", tags=["planet"])


@router.get("", response_model=PlanetSummary)
async def get_planet():
    """Summary of the current planet generation."""
    return PlanetSummary(**planet_session.builder.snapshot.summary())


@router.put("/settings", response_model=PlanetSummary)
async def update_settings(request: SettingsUpdate):
    """Apply a partial settings update.

    Only the stages the change invalidates are rebuilt: resolution
    re-tessellates, noise/displacement re-displace, sea level and counts
    only rescatter.
    """
    try:
        snapshot = planet_session.builder.update(**request.changes())
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return PlanetSummary(**snapshot.summary())


@router.get("/buffers", response_model=BuffersResponse)
async def get_buffers():
    """Flat vertex/normal/index buffers and prop transforms for the GPU."""
    snapshot = planet_session.builder.snapshot
    positions, normals, indices = snapshot.terrain.buffers()
    return BuffersResponse(
        version=snapshot.version,
        positions=positions.tolist(),
        normals=normals.tolist(),
        indices=indices.tolist(),
        instances=[InstanceOut(**inst.to_dict()) for inst in snapshot.instances],
    )


@router.post("/pick", response_model=PickResponse)
async def pick(request: PickRequest):
    """Place a prop where the camera ray through (x, y) meets the planet.

    A miss is a normal outcome and is reported with ``hit: false``.
    """
    builder = planet_session.builder
    try:
        hit, instance = builder.place_prop_at_ndc(
            request.x, request.y, category=request.category,
            angle=request.angle, aspect=request.aspect)
    except NoPickHit:
        return PickResponse(hit=False, version=builder.version)

    return PickResponse(
        hit=True,
        version=builder.version,
        triangle=hit.triangle,
        vertex_indices=list(hit.vertex_indices),
        t=hit.t,
        instance=InstanceOut(**instance.to_dict()),
    )


@router.post("/export", response_model=JobResponse)
async def start_export(request: ExportRequest):
    """Export the current snapshot to GLB in the background.

    The caller receives a job ID immediately and can poll
    ``/export/{job_id}`` for progress.
    """
    builder = planet_session.builder
    model = builder.planet_model(request.angle) if request.angle else None

    job = job_manager.start_export(builder.snapshot, request.filename,
                                   planet_model=model)

    return JobResponse(
        job_id=job.id,
        status=job.status.value,
        progress=job.progress,
        message=job.message,
        result=job.result,
    )


@router.get("/export/{job_id}", response_model=JobResponse)
async def get_export_status(job_id: str):
    """Poll the status of a running or completed export job."""
    job = job_manager.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")

    return JobResponse(
        job_id=job.id,
        status=job.status.value,
        progress=job.progress,
        message=job.message,
        result=job.result,
    )
