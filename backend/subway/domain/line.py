"""Line aggregate: identity, display attributes and its sections."""

from __future__ import annotations

import uuid
from collections.abc import Iterable

from subway.domain.section import Section
from subway.domain.sections import Sections
from subway.domain.station import Station
from subway.domain.updated_section import UpdatedSection


class Line:
    """
    A subway line. All topology operations are delegated to ``Sections``.

    Two lines are equal when their names are equal, whatever their ids.
    Existing callers rely on this, so it is kept as is.
    """

    def __init__(
        self,
        id: uuid.UUID | None,  # noqa: A002
        name: str,
        color: str,
        sections: Sections,
    ) -> None:
        self.id = id
        self.name = name
        self.color = color
        self._sections = sections

    @classmethod
    def create(cls, id: uuid.UUID | None, name: str, color: str, section: Section) -> Line:  # noqa: A002
        """Create a new line from its first section."""
        return cls(id, name, color, Sections.of(section))

    @classmethod
    def load(cls, id: uuid.UUID | None, name: str, color: str, sections: Iterable[Section]) -> Line:  # noqa: A002
        """Rebuild a line from persisted sections (any order)."""
        return cls(id, name, color, Sections.assemble(sections))

    @property
    def sections(self) -> Sections:
        return self._sections

    def update(self, name: str, color: str) -> None:
        self.name = name
        self.color = color

    def insert_section(self, section: Section) -> Section | None:
        return self._sections.insert(section)

    def delete_station(self, station: Station) -> UpdatedSection:
        return self._sections.delete(station)

    def get_stations(self) -> list[Station]:
        return self._sections.get_stations()

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Line):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        """String representation of the line."""
        return f"<Line(id={self.id}, name={self.name}, color={self.color})>"
