"""Subway data models: stations, lines and the sections that connect them."""

import uuid

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from subway.models.base import BaseModel


class Station(BaseModel):
    """Station model. Stations exist independently of lines."""

    __tablename__ = "stations"

    name: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        """String representation of the station."""
        return f"<Station(id={self.id}, name={self.name})>"


class Line(BaseModel):
    """Line model. Station order is not stored; it is rebuilt from sections."""

    __tablename__ = "lines"

    name: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    color: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )

    # Relationships
    sections: Mapped[list["Section"]] = relationship(
        back_populates="line",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        """String representation of the line."""
        return f"<Line(id={self.id}, name={self.name}, color={self.color})>"


class Section(BaseModel):
    """Directed section between two stations of a line. Rows are unordered."""

    __tablename__ = "sections"

    line_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("lines.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    up_station_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("stations.id", ondelete="RESTRICT"),
        nullable=False,
    )
    down_station_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("stations.id", ondelete="RESTRICT"),
        nullable=False,
    )
    distance: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    # Relationships
    line: Mapped[Line] = relationship(back_populates="sections")
    up_station: Mapped[Station] = relationship(foreign_keys=[up_station_id])
    down_station: Mapped[Station] = relationship(foreign_keys=[down_station_id])

    # A station is left by at most one section and reached by at most one
    # section on the same line
    __table_args__ = (
        UniqueConstraint("line_id", "up_station_id", name="uq_sections_line_up_station"),
        UniqueConstraint("line_id", "down_station_id", name="uq_sections_line_down_station"),
        CheckConstraint("distance > 0", name="ck_sections_distance_positive"),
        CheckConstraint("up_station_id <> down_station_id", name="ck_sections_distinct_stations"),
    )

    def __repr__(self) -> str:
        """String representation of the section."""
        return (
            f"<Section(id={self.id}, line_id={self.line_id}, up={self.up_station_id}, "
            f"down={self.down_station_id}, distance={self.distance})>"
        )
