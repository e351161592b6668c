"""
Line-topology engine.

A line is stored as an unordered set of directed sections. ``Sections``
rebuilds the ordered path from that set and keeps it a single simple path
(no branches, cycles or gaps) while sections are inserted or stations
removed one at a time.

Concurrency: one ``Sections`` instance must only be mutated by one writer.
Callers that load sections from storage are responsible for serialising
access per line (the services hold a row lock on the line for the whole
load-mutate-persist transaction). The engine itself has no versioning.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from subway.domain.exceptions import TopologyError, ValidationError
from subway.domain.section import Section
from subway.domain.station import Station
from subway.domain.updated_section import UpdatedSection

MIN_SIZE = 1


class Sections:
    """Ordered sections of one line, head to tail."""

    def __init__(self, ordered_sections: list[Section]) -> None:
        """
        Wrap sections that are already in path order.

        Use ``Sections.assemble()`` for sections loaded from storage.

        Args:
            ordered_sections: Sections where each one starts at the previous one's down-station

        Raises:
            TopologyError: If no sections are given
        """
        if not ordered_sections:
            msg = "Line has no sections"
            raise TopologyError(msg, section_count=0)
        self._sections = list(ordered_sections)

    # ==================== Assembly ====================

    @classmethod
    def of(cls, section: Section) -> Sections:
        """Create a line path made of a single section."""
        return cls([section])

    @classmethod
    def assemble(cls, sections: Iterable[Section]) -> Sections:
        """
        Order an unordered collection of sections into a path.

        The head is the up-station that never appears as a down-station.
        From there the path is followed through a map keyed by up-station
        until the tail is reached, so assembly is O(n) and independent of
        the input order.

        Args:
            sections: All sections of one line, in any order

        Returns:
            Sections in path order

        Raises:
            TopologyError: If the sections do not form exactly one simple path
        """
        unordered = list(sections)
        if not unordered:
            msg = "Line has no sections"
            raise TopologyError(msg, section_count=0)

        by_up_station = {section.up_station: section for section in unordered}
        down_stations = {section.down_station for section in unordered}

        head = next((station for station in by_up_station if station not in down_stations), None)
        if head is None:
            msg = "No head station found: every up-station is also a down-station"
            raise TopologyError(msg, section_count=len(unordered))

        ordered: list[Section] = []
        visited: set[Station] = set()
        cursor = head
        while cursor in by_up_station:
            if cursor in visited:
                msg = f"Sections form a cycle at station {cursor.name}"
                raise TopologyError(msg, section_count=len(unordered))
            visited.add(cursor)
            section = by_up_station[cursor]
            ordered.append(section)
            cursor = section.down_station

        if len(ordered) != len(unordered):
            msg = f"Sections do not form a single path: reached {len(ordered)} of {len(unordered)} sections from head"
            raise TopologyError(msg, section_count=len(unordered))

        return cls(ordered)

    # ==================== Queries ====================

    @property
    def sections(self) -> tuple[Section, ...]:
        return tuple(self._sections)

    @property
    def head(self) -> Station:
        return self._sections[0].up_station

    @property
    def tail(self) -> Station:
        return self._sections[-1].down_station

    @property
    def total_distance(self) -> int:
        return sum(section.distance for section in self._sections)

    def get_stations(self) -> list[Station]:
        """Return the path's stations from head to tail."""
        stations: list[Station] = []
        for section in self._sections:
            stations.append(section.up_station)
            stations.append(section.down_station)
        return list(dict.fromkeys(stations))

    def __len__(self) -> int:
        return len(self._sections)

    def __iter__(self) -> Iterator[Section]:
        return iter(tuple(self._sections))

    def __repr__(self) -> str:
        """String representation of the path."""
        names = " -> ".join(station.name for station in self.get_stations())
        return f"<Sections({names})>"

    # ==================== Insertion ====================

    def insert(self, section: Section) -> Section | None:
        """
        Add a section to the line.

        A section that shares its up-station (or down-station) with a strictly
        longer existing section splits that section in two: the existing
        section keeps its identity and the remaining distance. Otherwise the
        section must extend the line at the head or the tail.

        Args:
            section: New section to add

        Returns:
            The split section's new state, or None when the line was extended
            at one end and no existing section changed

        Raises:
            ValidationError: If both endpoints are already on the line, the
                section belongs to another line, it is not shorter than the
                section it would split, or it cannot be connected at all
        """
        self._check_same_line(section)
        self._check_not_already_connected(section)

        too_long = False
        for index, existing in enumerate(self._sections):
            shares_up = existing.has_up_station(section.up_station)
            shares_down = existing.has_down_station(section.down_station)
            if shares_up == shares_down:
                continue
            if not existing.is_longer_than(section.distance):
                too_long = True
                continue

            remaining = existing.distance - section.distance
            if shares_up:
                split = existing.shrink_from_up(section.down_station, remaining)
                self._sections[index : index + 1] = [section, split]
            else:
                split = existing.shrink_from_down(section.up_station, remaining)
                self._sections[index : index + 1] = [split, section]
            return split

        if self._sections[-1].has_down_station(section.up_station):
            self._sections.append(section)
            return None
        if self._sections[0].has_up_station(section.down_station):
            self._sections.insert(0, section)
            return None

        if too_long:
            msg = "Section distance must be shorter than the section it splits"
            raise ValidationError(msg)
        msg = "Section cannot be connected to the line"
        raise ValidationError(msg)

    def _check_same_line(self, section: Section) -> None:
        line_id = self._sections[0].line_id
        if line_id is not None and section.line_id is not None and section.line_id != line_id:
            msg = "Section belongs to a different line"
            raise ValidationError(msg)

    def _check_not_already_connected(self, section: Section) -> None:
        stations = set(self.get_stations())
        if section.up_station in stations and section.down_station in stations:
            msg = (
                f"Stations {section.up_station.name} and {section.down_station.name} "
                "are both already on the line"
            )
            raise ValidationError(msg)

    # ==================== Deletion ====================

    def delete(self, station: Station) -> UpdatedSection:
        """
        Remove a station from the line.

        Removing the head or tail drops the boundary section. Removing an
        interior station merges the two sections around it: the left one
        survives and absorbs the right one's distance and down-station.

        Args:
            station: Station to remove

        Returns:
            UpdatedSection naming the removed section and the merged survivor (if any)

        Raises:
            ValidationError: If only one section remains or the station is not on the line
        """
        if len(self._sections) <= MIN_SIZE:
            msg = "Cannot remove a station from a line with only one section"
            raise ValidationError(msg)

        if self._sections[0].has_up_station(station):
            removed = self._sections.pop(0)
            return UpdatedSection(removed_section_id=removed.id)

        if self._sections[-1].has_down_station(station):
            removed = self._sections.pop()
            return UpdatedSection(removed_section_id=removed.id)

        for index, left in enumerate(self._sections[:-1]):
            if left.has_down_station(station):
                right = self._sections[index + 1]
                survivor = left.merge(right)
                self._sections[index : index + 2] = [survivor]
                return UpdatedSection(removed_section_id=right.id, survivor=survivor)

        msg = f"Station {station.name} not found in line"
        raise ValidationError(msg)
