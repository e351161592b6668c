"""Station registration service."""

import uuid

import structlog
from fastapi import HTTPException, status
from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from subway.models.subway import Section, Station
from subway.schemas.subway import StationRequest

logger = structlog.get_logger(__name__)


class StationService:
    """Service for registering and removing stations."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize the station service.

        Args:
            db: Database session
        """
        self.db = db

    async def create_station(self, request: StationRequest) -> Station:
        """
        Register a new station.

        Args:
            request: Station creation request

        Returns:
            Created station

        Raises:
            HTTPException: 409 if a station with the same name exists
        """
        existing = await self.db.execute(select(Station).where(Station.name == request.name))
        if existing.scalar_one_or_none():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Station '{request.name}' already exists.",
            )

        station = Station(name=request.name)
        self.db.add(station)
        await self.db.commit()
        await self.db.refresh(station)

        logger.info("station_created", station_id=str(station.id), name=station.name)
        return station

    async def list_stations(self) -> list[Station]:
        result = await self.db.execute(select(Station).order_by(Station.name))
        return list(result.scalars().all())

    async def get_station_by_id(self, station_id: uuid.UUID) -> Station:
        """
        Get a station by ID.

        Raises:
            HTTPException: 404 if station not found
        """
        result = await self.db.execute(select(Station).where(Station.id == station_id))
        if not (station := result.scalar_one_or_none()):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Station not found.",
            )
        return station

    async def get_stations_by_ids(self, station_ids: list[uuid.UUID]) -> dict[uuid.UUID, Station]:
        """
        Get several stations at once.

        Raises:
            HTTPException: 404 if any of the stations does not exist
        """
        result = await self.db.execute(select(Station).where(Station.id.in_(station_ids)))
        stations = {station.id: station for station in result.scalars().all()}
        if missing := [str(station_id) for station_id in station_ids if station_id not in stations]:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Station not found: {', '.join(missing)}",
            )
        return stations

    async def delete_station(self, station_id: uuid.UUID) -> bool:
        """
        Delete a station that no line uses.

        Args:
            station_id: Station UUID

        Returns:
            True if a station was deleted, False if there was nothing to delete

        Raises:
            HTTPException: 400 if a section still references the station
        """
        in_use = await self.db.execute(
            select(Section.id)
            .where(or_(Section.up_station_id == station_id, Section.down_station_id == station_id))
            .limit(1)
        )
        if in_use.scalar_one_or_none():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Station is used by a line. Remove it from the line first.",
            )

        result = await self.db.execute(delete(Station).where(Station.id == station_id))
        await self.db.commit()

        deleted = result.rowcount > 0
        if deleted:
            logger.info("station_deleted", station_id=str(station_id))
        return deleted
