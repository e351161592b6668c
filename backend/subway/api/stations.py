"""Station API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from subway.core.config import settings
from subway.core.database import get_db
from subway.models.subway import Station
from subway.schemas.subway import StationRequest, StationResponse
from subway.services.station_service import StationService

router = APIRouter(prefix="/stations", tags=["stations"])


@router.post("", response_model=StationResponse, status_code=status.HTTP_201_CREATED)
async def create_station(
    request: StationRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
) -> Station:
    """
    Register a station.

    Args:
        request: Station creation request
        response: Outgoing response (for the Location header)
        db: Database session

    Returns:
        Created station
    """
    service = StationService(db)
    station = await service.create_station(request)
    response.headers["Location"] = f"{settings.API_V1_PREFIX}/stations/{station.id}"
    return station


@router.get("", response_model=list[StationResponse])
async def list_stations(db: AsyncSession = Depends(get_db)) -> list[Station]:
    """List all registered stations ordered by name."""
    service = StationService(db)
    return await service.list_stations()


@router.delete("/{station_id}")
async def delete_station(station_id: UUID, db: AsyncSession = Depends(get_db)) -> Response:
    """
    Delete a station.

    Returns 200 when a station was deleted and 204 when there was nothing to
    delete. Stations still used by a line cannot be deleted (400).
    """
    service = StationService(db)
    if await service.delete_station(station_id):
        return Response(status_code=status.HTTP_200_OK)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
