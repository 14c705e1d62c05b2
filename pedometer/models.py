"""Data models for step counting and run records."""

from datetime import datetime
from typing import Optional, Sequence

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .formatting import STEP_LENGTH_M, distance_km, format_distance


class AccelerometerReading(BaseModel):
    """Acceleration including gravity from the motion source."""

    # axes must arrive as numbers; strings and booleans are malformed
    model_config = ConfigDict(strict=True)

    x: float = Field(allow_inf_nan=False, description="X-axis acceleration in m/s²")
    y: float = Field(allow_inf_nan=False, description="Y-axis acceleration in m/s²")
    z: float = Field(allow_inf_nan=False, description="Z-axis acceleration in m/s²")


class GeoPoint(BaseModel):
    """One recorded GPS fix."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    lat: float = Field(
        allow_inf_nan=False,
        validation_alias=AliasChoices("lat", "latitude"),
        description="Latitude in decimal degrees",
    )
    lng: float = Field(
        allow_inf_nan=False,
        validation_alias=AliasChoices("lng", "longitude"),
        description="Longitude in decimal degrees",
    )


# Map center used when a run has no recorded path
DEFAULT_MAP_CENTER = GeoPoint(lat=-34.397, lng=150.644)


class PathBounds(BaseModel):
    """Bounding box of a recorded path."""

    min_lat: float
    min_lng: float
    max_lat: float
    max_lng: float


def path_bounds(path: Sequence[GeoPoint]) -> Optional[PathBounds]:
    if not path:
        return None
    lats = [p.lat for p in path]
    lngs = [p.lng for p in path]
    return PathBounds(
        min_lat=min(lats),
        min_lng=min(lngs),
        max_lat=max(lats),
        max_lng=max(lngs),
    )


class Run(BaseModel):
    """Archived walking session. Never mutated after creation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int = Field(description="Millisecond timestamp identifier, unique and sortable")
    date: str = Field(description="Human-readable local creation time")
    steps: int = Field(ge=0, description="Steps counted during the session")
    start_time: datetime = Field(alias="startTime")
    end_time: datetime = Field(alias="endTime")
    path: tuple[GeoPoint, ...] = Field(default=(), description="Fixes in arrival order")


class RunSummary(BaseModel):
    """One row of the run history list."""

    id: int
    date: str
    steps: int
    distance_km: float
    distance_text: str

    @classmethod
    def from_run(cls, run: Run, step_length_m: float = STEP_LENGTH_M) -> "RunSummary":
        return cls(
            id=run.id,
            date=run.date,
            steps=run.steps,
            distance_km=distance_km(run.steps, step_length_m),
            distance_text=format_distance(run.steps, step_length_m),
        )


class RunDetail(Run):
    """A run with what the map view needs to replay it."""

    distance_text: str
    center: GeoPoint
    bounds: Optional[PathBounds] = None

    @classmethod
    def from_run(cls, run: Run, step_length_m: float = STEP_LENGTH_M) -> "RunDetail":
        return cls(
            **run.model_dump(by_alias=True),
            distance_text=format_distance(run.steps, step_length_m),
            center=run.path[0] if run.path else DEFAULT_MAP_CENTER,
            bounds=path_bounds(run.path),
        )


class SessionStatus(BaseModel):
    """Live counters for the tracker display."""

    active: bool
    steps: int = 0
    distance_km: float = 0.0
    distance_text: str = "0.00 km"
    elapsed: str = "00:00:00"


class StartRequest(BaseModel):
    """Outcome of the client-side motion permission prompt."""

    permission_granted: bool = True


class StopResult(BaseModel):
    archived: bool
    run: Optional[Run] = None


class MotionResult(BaseModel):
    delivered: bool
    step: bool
    steps: int


class FixResult(BaseModel):
    delivered: bool
    points: int
