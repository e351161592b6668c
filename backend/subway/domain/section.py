"""Section: a directed, distance-weighted edge between two stations of a line."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace

from subway.domain.exceptions import ValidationError
from subway.domain.station import Station


@dataclass(frozen=True)
class Section:
    """
    Directed edge from ``up_station`` to ``down_station`` owned by one line.

    Sections are immutable records. Splitting and merging produce a new
    record that keeps the same ``id`` and ``line_id`` so the persistence
    layer can update the existing row in place.

    Raises:
        ValidationError: If distance is not positive or both endpoints are the same station
    """

    id: uuid.UUID
    line_id: uuid.UUID | None
    up_station: Station
    down_station: Station
    distance: int

    def __post_init__(self) -> None:
        if self.distance <= 0:
            msg = f"Section distance must be positive. Got {self.distance}"
            raise ValidationError(msg)
        if self.up_station == self.down_station:
            msg = f"Section cannot start and end at the same station ({self.up_station.name})"
            raise ValidationError(msg)

    def has_up_station(self, station: Station) -> bool:
        return self.up_station == station

    def has_down_station(self, station: Station) -> bool:
        return self.down_station == station

    def is_longer_than(self, distance: int) -> bool:
        return self.distance > distance

    def shrink_from_up(self, new_up_station: Station, new_distance: int) -> Section:
        """
        Return this section starting from ``new_up_station`` with a shorter distance.

        Used when a shorter section is inserted after this section's up-station.

        Args:
            new_up_station: Station the section now starts from
            new_distance: Remaining distance, strictly less than the current one

        Returns:
            New Section with the same identity

        Raises:
            ValidationError: If new_distance is not strictly shorter
        """
        self._check_shrinks_to(new_distance)
        return replace(self, up_station=new_up_station, distance=new_distance)

    def shrink_from_down(self, new_down_station: Station, new_distance: int) -> Section:
        """
        Return this section ending at ``new_down_station`` with a shorter distance.

        Used when a shorter section is inserted before this section's down-station.

        Args:
            new_down_station: Station the section now ends at
            new_distance: Remaining distance, strictly less than the current one

        Returns:
            New Section with the same identity

        Raises:
            ValidationError: If new_distance is not strictly shorter
        """
        self._check_shrinks_to(new_distance)
        return replace(self, down_station=new_down_station, distance=new_distance)

    def merge(self, following: Section) -> Section:
        """Return this section extended over ``following`` (which must start where this one ends)."""
        if not following.has_up_station(self.down_station):
            msg = f"Cannot merge {following!r} into {self!r}: sections are not adjacent"
            raise ValidationError(msg)
        return replace(
            self,
            down_station=following.down_station,
            distance=self.distance + following.distance,
        )

    def _check_shrinks_to(self, new_distance: int) -> None:
        if not self.is_longer_than(new_distance):
            msg = f"Section can only shrink: {new_distance} is not shorter than {self.distance}"
            raise ValidationError(msg)

    def __repr__(self) -> str:
        """String representation of the section."""
        return (
            f"<Section(id={self.id}, up={self.up_station.name}, "
            f"down={self.down_station.name}, distance={self.distance})>"
        )
