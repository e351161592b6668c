"""Line management service.

Loads a line's sections from storage, hands them to the topology engine in
``subway.domain`` and writes back only the rows the engine changed.

Topology changes follow a load-mutate-persist cycle inside one transaction.
The line row is locked (``SELECT ... FOR UPDATE``) for the whole cycle so two
requests never compute a split or merge against the same stale section. On
databases without row locks the unique (line, up-station) and
(line, down-station) constraints reject the losing write instead.
"""

import uuid

import structlog
from fastapi import HTTPException, status
from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from subway import domain
from subway.core.telemetry import service_span
from subway.models.subway import Line, Section, Station
from subway.schemas.subway import CreateLineRequest, SectionRequest, UpdateLineRequest
from subway.services.station_service import StationService

logger = structlog.get_logger(__name__)

SERVICE_NAME = "line-service"


# ==================== Row <-> Domain Conversion ====================


def to_domain_station(row: Station) -> domain.Station:
    return domain.Station(id=row.id, name=row.name)


def to_domain_section(row: Section) -> domain.Section:
    """Convert a section row (with stations loaded) to a domain section."""
    return domain.Section(
        id=row.id,
        line_id=row.line_id,
        up_station=to_domain_station(row.up_station),
        down_station=to_domain_station(row.down_station),
        distance=row.distance,
    )


def to_section_row(section: domain.Section) -> Section:
    return Section(
        id=section.id,
        line_id=section.line_id,
        up_station_id=section.up_station.id,
        down_station_id=section.down_station.id,
        distance=section.distance,
    )


class LineService:
    """Service for managing lines and their sections."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize the line service.

        Args:
            db: Database session
        """
        self.db = db
        self.station_service = StationService(db)

    # ==================== Private Helper Methods ====================

    async def _get_line_row(self, line_id: uuid.UUID, *, for_update: bool = False) -> Line:
        """
        Fetch a line row, optionally locking it for a topology change.

        Raises:
            HTTPException: 404 if line not found
        """
        query = select(Line).where(Line.id == line_id)
        if for_update:
            query = query.with_for_update()

        result = await self.db.execute(query)
        if not (line := result.scalar_one_or_none()):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Line not found.",
            )
        return line

    async def _check_name_available(self, name: str, exclude_line_id: uuid.UUID | None = None) -> None:
        """
        Raises:
            HTTPException: 409 if another line already uses the name
        """
        query = select(Line.id).where(Line.name == name)
        if exclude_line_id is not None:
            query = query.where(Line.id != exclude_line_id)

        result = await self.db.execute(query)
        if result.scalar_one_or_none():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Line '{name}' already exists.",
            )

    async def _load_line(self, row: Line) -> domain.Line:
        """
        Load all sections of a line and assemble them into a path.

        Raises:
            HTTPException: 500 if the stored sections do not form a single path
        """
        result = await self.db.execute(
            select(Section)
            .where(Section.line_id == row.id)
            .options(selectinload(Section.up_station), selectinload(Section.down_station))
            # Rows changed by bulk UPDATEs in this session must not be served from the identity map
            .execution_options(populate_existing=True)
        )
        sections = [to_domain_section(section) for section in result.scalars().all()]

        try:
            return domain.Line.load(row.id, row.name, row.color, sections)
        except domain.TopologyError as e:
            logger.error(
                "line_topology_corrupted",
                line_id=str(row.id),
                section_count=e.section_count,
                error=str(e),
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Line data is inconsistent.",
            ) from e

    async def _apply_section_state(self, section: domain.Section) -> None:
        """Write a split or merged section's endpoints and distance back to its row."""
        await self.db.execute(
            update(Section)
            .where(Section.id == section.id)
            .values(
                up_station_id=section.up_station.id,
                down_station_id=section.down_station.id,
                distance=section.distance,
            )
        )

    async def _commit_topology_change(self, line_id: uuid.UUID) -> None:
        """
        Commit a topology change.

        Raises:
            HTTPException: 409 if a concurrent change to the same line won
        """
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.warning("line_topology_conflict", line_id=str(line_id))
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Line was modified concurrently. Please retry.",
            ) from None

    # ==================== Public API Methods ====================

    async def create_line(self, request: CreateLineRequest) -> domain.Line:
        """
        Create a line with its first section.

        Args:
            request: Line creation request

        Returns:
            Created line

        Raises:
            HTTPException: 409 if the name is taken, 404 if a station is unknown,
                400 if the first section is invalid
        """
        await self._check_name_available(request.name)
        stations = await self.station_service.get_stations_by_ids([request.up_station_id, request.down_station_id])

        line_id = uuid.uuid4()
        try:
            first_section = domain.Section(
                id=uuid.uuid4(),
                line_id=line_id,
                up_station=to_domain_station(stations[request.up_station_id]),
                down_station=to_domain_station(stations[request.down_station_id]),
                distance=request.distance,
            )
        except domain.ValidationError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(e),
            ) from e
        line = domain.Line.create(line_id, request.name, request.color, first_section)

        self.db.add(Line(id=line_id, name=request.name, color=request.color))
        await self.db.flush()
        self.db.add(to_section_row(first_section))

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Line '{request.name}' already exists.",
            ) from None

        logger.info("line_created", line_id=str(line_id), name=request.name)
        return line

    async def list_lines(self) -> list[Line]:
        result = await self.db.execute(select(Line).order_by(Line.name))
        return list(result.scalars().all())

    async def get_line(self, line_id: uuid.UUID) -> domain.Line:
        """
        Get a line with its sections in path order.

        Raises:
            HTTPException: 404 if line not found, 500 if its sections are inconsistent
        """
        row = await self._get_line_row(line_id)
        return await self._load_line(row)

    async def update_line(self, line_id: uuid.UUID, request: UpdateLineRequest) -> domain.Line:
        """
        Rename or recolor a line.

        Raises:
            HTTPException: 404 if line not found, 409 if the name is taken by another line
        """
        row = await self._get_line_row(line_id)
        await self._check_name_available(request.name, exclude_line_id=line_id)

        line = await self._load_line(row)
        line.update(request.name, request.color)
        row.name = line.name
        row.color = line.color

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Line '{request.name}' already exists.",
            ) from None

        logger.info("line_updated", line_id=str(line_id), name=line.name, color=line.color)
        return line

    async def delete_line(self, line_id: uuid.UUID) -> None:
        """
        Delete a line and all of its sections. Stations are kept.

        Raises:
            HTTPException: 404 if line not found
        """
        await self._get_line_row(line_id, for_update=True)
        await self.db.execute(delete(Section).where(Section.line_id == line_id))
        await self.db.execute(delete(Line).where(Line.id == line_id))
        await self.db.commit()

        logger.info("line_deleted", line_id=str(line_id))

    async def add_section(self, line_id: uuid.UUID, request: SectionRequest) -> domain.Section:
        """
        Add a section to a line, splitting an existing section if needed.

        Persists one new section row and, when an existing section was split,
        updates that row's endpoint and distance.

        Args:
            line_id: Line UUID
            request: Section to add

        Returns:
            The added section

        Raises:
            HTTPException: 404 if line or station not found, 400 if the section
                cannot be added, 409 on a concurrent change, 500 if stored data is inconsistent
        """
        with service_span("line.add_section", SERVICE_NAME, **{"line.id": str(line_id)}) as span:
            row = await self._get_line_row(line_id, for_update=True)
            line = await self._load_line(row)
            stations = await self.station_service.get_stations_by_ids([request.up_station_id, request.down_station_id])

            try:
                section = domain.Section(
                    id=uuid.uuid4(),
                    line_id=line_id,
                    up_station=to_domain_station(stations[request.up_station_id]),
                    down_station=to_domain_station(stations[request.down_station_id]),
                    distance=request.distance,
                )
                split = line.insert_section(section)
            except domain.ValidationError as e:
                logger.info("section_rejected", line_id=str(line_id), reason=str(e))
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=str(e),
                ) from e

            # Update the split row before inserting: the unique (line, station)
            # constraints must hold after every statement
            if split is not None:
                await self._apply_section_state(split)
                await self.db.flush()
            self.db.add(to_section_row(section))
            await self._commit_topology_change(line_id)

            span.set_attribute("line.section_count", len(line.sections))
            span.set_attribute("line.split", split is not None)
            logger.info(
                "section_added",
                line_id=str(line_id),
                section_id=str(section.id),
                split_section_id=str(split.id) if split else None,
            )
            return section

    async def remove_station(self, line_id: uuid.UUID, station_id: uuid.UUID) -> domain.UpdatedSection:
        """
        Remove a station from a line.

        Deletes the removed section row and, when two sections were merged,
        updates the surviving row.

        Args:
            line_id: Line UUID
            station_id: Station to remove from the line

        Returns:
            UpdatedSection describing the change

        Raises:
            HTTPException: 404 if line or station not found, 400 if the station cannot
                be removed, 409 on a concurrent change, 500 if stored data is inconsistent
        """
        with service_span("line.remove_station", SERVICE_NAME, **{"line.id": str(line_id)}) as span:
            row = await self._get_line_row(line_id, for_update=True)
            line = await self._load_line(row)
            station = to_domain_station(await self.station_service.get_station_by_id(station_id))

            try:
                result = line.delete_station(station)
            except domain.ValidationError as e:
                logger.info("station_removal_rejected", line_id=str(line_id), reason=str(e))
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=str(e),
                ) from e

            # Delete before updating the survivor for the same reason as in add_section
            await self.db.execute(delete(Section).where(Section.id == result.removed_section_id))
            if result.survivor is not None:
                await self._apply_section_state(result.survivor)
            await self._commit_topology_change(line_id)

            span.set_attribute("line.section_count", len(line.sections))
            span.set_attribute("line.merged", result.is_merge)
            logger.info(
                "station_removed",
                line_id=str(line_id),
                station_id=str(station_id),
                removed_section_id=str(result.removed_section_id),
                merged=result.is_merge,
            )
            return result
