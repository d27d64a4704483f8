from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, conint

from planetbuilder.models import NoiseMode, PropCategory


class SettingsUpdate(BaseModel):
    resolution: Optional[int] = Field(default=None, ge=1, le=1000)
    noise_mode: Optional[NoiseMode] = None
    displacement: Optional[float] = None
    sea_level: Optional[float] = None
    counts: Optional[Dict[PropCategory, conint(ge=0)]] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_none=True)


class PlanetSummary(BaseModel):
    version: int
    settings: dict
    vertices: int
    triangles: int
    height_min: float
    height_max: float
    instances: Dict[str, int]
    exhausted: List[str] = []


class InstanceOut(BaseModel):
    category: str
    model: List[float]      # 16 floats, row-major, column-vector convention


class BuffersResponse(BaseModel):
    version: int
    positions: List[float]
    normals: List[float]
    indices: List[int]
    instances: List[InstanceOut]


class PickRequest(BaseModel):
    x: float = Field(ge=-1.0, le=1.0)
    y: float = Field(ge=-1.0, le=1.0)
    aspect: float = Field(default=1.0, gt=0)    # viewport width / height
    angle: float = 0.0
    category: PropCategory = PropCategory.TREE


class PickResponse(BaseModel):
    hit: bool
    version: int
    triangle: Optional[int] = None
    vertex_indices: Optional[List[int]] = None
    t: Optional[float] = None
    instance: Optional[InstanceOut] = None


class ExportRequest(BaseModel):
    filename: str = "planet.glb"
    angle: float = 0.0


class JobResponse(BaseModel):
    job_id: str
    status: str
    progress: float
    message: str
    result: Optional[dict] = None


class ExportedPlanet(BaseModel):
    filename: str
    model_url: str
    size_bytes: int
    modified: datetime
    # known only for exports written by the running service
    version: Optional[int] = None
    settings: Optional[dict] = None
    instances: Optional[Dict[str, int]] = None
