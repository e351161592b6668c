"""Line API endpoints, including adding and removing sections."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from subway import domain
from subway.core.config import settings
from subway.core.database import get_db
from subway.models.subway import Line
from subway.schemas.subway import (
    CreateLineRequest,
    LineListItemResponse,
    LineResponse,
    SectionRequest,
    SectionResponse,
    StationResponse,
    UpdateLineRequest,
)
from subway.services.line_service import LineService

router = APIRouter(prefix="/lines", tags=["lines"])


def _line_response(line: domain.Line) -> LineResponse:
    """Build a response with the line's stations in path order."""
    return LineResponse(
        id=line.id,
        name=line.name,
        color=line.color,
        stations=[StationResponse.model_validate(station) for station in line.get_stations()],
        total_distance=line.sections.total_distance,
    )


# ==================== Line Endpoints ====================


@router.post("", response_model=LineResponse, status_code=status.HTTP_201_CREATED)
async def create_line(
    request: CreateLineRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
) -> LineResponse:
    """
    Create a line together with its first section.

    Args:
        request: Line creation request
        response: Outgoing response (for the Location header)
        db: Database session

    Returns:
        Created line with its two stations
    """
    service = LineService(db)
    line = await service.create_line(request)
    response.headers["Location"] = f"{settings.API_V1_PREFIX}/lines/{line.id}"
    return _line_response(line)


@router.get("", response_model=list[LineListItemResponse])
async def list_lines(db: AsyncSession = Depends(get_db)) -> list[Line]:
    """List all lines ordered by name."""
    service = LineService(db)
    return await service.list_lines()


@router.get("/{line_id}", response_model=LineResponse)
async def get_line(line_id: UUID, db: AsyncSession = Depends(get_db)) -> LineResponse:
    """Get a line with its stations from head to tail."""
    service = LineService(db)
    return _line_response(await service.get_line(line_id))


@router.put("/{line_id}", response_model=LineResponse)
async def update_line(
    line_id: UUID,
    request: UpdateLineRequest,
    db: AsyncSession = Depends(get_db),
) -> LineResponse:
    """Rename or recolor a line."""
    service = LineService(db)
    return _line_response(await service.update_line(line_id, request))


@router.delete("/{line_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_line(line_id: UUID, db: AsyncSession = Depends(get_db)) -> None:
    """Delete a line and its sections."""
    service = LineService(db)
    await service.delete_line(line_id)


# ==================== Section Endpoints ====================


@router.post("/{line_id}/sections", response_model=SectionResponse, status_code=status.HTTP_201_CREATED)
async def add_section(
    line_id: UUID,
    request: SectionRequest,
    db: AsyncSession = Depends(get_db),
) -> SectionResponse:
    """
    Add a section to a line.

    The section either extends the line at one end, or splits an existing
    section that shares its up-station or down-station and is strictly longer.

    Args:
        line_id: Line UUID
        request: Section to add
        db: Database session

    Returns:
        The added section

    Raises:
        HTTPException: 400 if the section cannot be added to the line
    """
    service = LineService(db)
    return SectionResponse.model_validate(await service.add_section(line_id, request))


@router.delete("/{line_id}/sections", status_code=status.HTTP_204_NO_CONTENT)
async def remove_station(
    line_id: UUID,
    station_id: UUID = Query(..., description="Station to remove from the line"),
    db: AsyncSession = Depends(get_db),
) -> None:
    """
    Remove a station from a line.

    Removing an end station drops its section; removing an interior station
    merges the two sections around it.

    Raises:
        HTTPException: 400 if the line has a single section or the station is not on it
    """
    service = LineService(db)
    await service.remove_station(line_id, station_id)
