"""Pydantic schemas for stations, lines and sections."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

# ==================== Helper Functions ====================


def _validate_distinct_stations(up_station_id: UUID, down_station_id: UUID) -> None:
    """
    Validate that a section connects two different stations - reusable helper.

    Raises:
        ValueError: If both station IDs are the same
    """
    if up_station_id == down_station_id:
        msg = "up_station_id and down_station_id must be different stations"
        raise ValueError(msg)


# ==================== Request Schemas ====================


class StationRequest(BaseModel):
    """Request to register a station."""

    name: str = Field(..., min_length=1, max_length=255, description="Station name")


class SectionRequest(BaseModel):
    """Request to add a section to a line."""

    up_station_id: UUID = Field(..., description="Station the section starts from")
    down_station_id: UUID = Field(..., description="Station the section ends at")
    distance: int = Field(..., gt=0, description="Distance between the two stations")

    @model_validator(mode="after")
    def validate_stations(self) -> "SectionRequest":
        """Ensure the section connects two different stations."""
        _validate_distinct_stations(self.up_station_id, self.down_station_id)
        return self


class CreateLineRequest(BaseModel):
    """Request to create a line together with its first section."""

    name: str = Field(..., min_length=1, max_length=255, description="Line name")
    color: str = Field(..., min_length=1, max_length=50, description="Display color (e.g., 'bg-red-600')")
    up_station_id: UUID = Field(..., description="First station of the line")
    down_station_id: UUID = Field(..., description="Last station of the line")
    distance: int = Field(..., gt=0, description="Distance between the two stations")

    @model_validator(mode="after")
    def validate_stations(self) -> "CreateLineRequest":
        """Ensure the first section connects two different stations."""
        _validate_distinct_stations(self.up_station_id, self.down_station_id)
        return self


class UpdateLineRequest(BaseModel):
    """Request to rename or recolor a line. Topology is not affected."""

    name: str = Field(..., min_length=1, max_length=255, description="Line name")
    color: str = Field(..., min_length=1, max_length=50, description="Display color")


# ==================== Response Schemas ====================


class StationResponse(BaseModel):
    """Station information."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str


class LineListItemResponse(BaseModel):
    """Line summary without stations."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    color: str


class LineResponse(BaseModel):
    """Line with its stations in path order (head to tail)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    color: str
    stations: list[StationResponse]
    total_distance: int


class SectionResponse(BaseModel):
    """Section information."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    line_id: UUID
    up_station: StationResponse
    down_station: StationResponse
    distance: int
