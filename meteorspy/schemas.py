import math
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class ApproachRecord(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: Optional[str]
    date: Optional[str]
    distance_au: float = Field(alias="distanceAu")
    distance_km: float = Field(alias="distanceKm")
    distance_lunar_distances: float = Field(alias="distanceLunarDistances")
    relative_velocity_km_per_sec: float = Field(alias="relativeVelocityKmPerSec")
    absolute_magnitude: float = Field(alias="absoluteMagnitude")
    orbit_id: Optional[str] = Field(alias="orbitId")

    @field_serializer(
        "distance_au",
        "distance_km",
        "distance_lunar_distances",
        "relative_velocity_km_per_sec",
        "absolute_magnitude",
        when_used="json",
    )
    def serialize_non_finite_as_null(self, value: float) -> Optional[float]:
        # JSON has no NaN or Infinity token
        return value if math.isfinite(value) else None


class NormalizedResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    count: int
    signature: Optional[Any] = None
    approaches: List[ApproachRecord]

    def to_wire(self) -> dict:
        # signature stays out of the body when it was never set
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class WelcomeResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
