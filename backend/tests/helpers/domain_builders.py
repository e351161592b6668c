"""Builders for in-memory domain objects used by the topology tests."""

import uuid

from subway.domain import Section, Sections, Station

LINE_ID = uuid.UUID("00000000-0000-0000-0000-0000000000aa")


def make_stations(*names: str) -> dict[str, Station]:
    """
    Create stations with fresh ids keyed by name.

    Example:
        >>> s = make_stations("A", "B")
        >>> s["A"].name
        'A'
    """
    return {name: Station(id=uuid.uuid4(), name=name) for name in names}


def make_section(up: Station, down: Station, distance: int, line_id: uuid.UUID | None = LINE_ID) -> Section:
    return Section(id=uuid.uuid4(), line_id=line_id, up_station=up, down_station=down, distance=distance)


def make_path(stations: dict[str, Station], *hops: tuple[str, str, int]) -> list[Section]:
    """
    Create sections from (up, down, distance) hops, in the given order.

    Example:
        make_path(s, ("A", "B", 5), ("B", "C", 3))  # A-(5)-B-(3)-C
    """
    return [make_section(stations[up], stations[down], distance) for up, down, distance in hops]


def station_names(sections: Sections) -> list[str]:
    return [station.name for station in sections.get_stations()]


def assert_simple_path(sections: Sections) -> None:
    """Assert that consecutive sections connect and no station repeats."""
    ordered = sections.sections
    for left, right in zip(ordered, ordered[1:], strict=False):
        assert left.down_station == right.up_station
    stations = sections.get_stations()
    assert len(stations) == len(set(stations)) == len(ordered) + 1
