"""Tests for the Line aggregate."""

import uuid

import pytest
from subway.domain import Line, Sections, ValidationError

from tests.helpers.domain_builders import make_path, make_section, make_stations, station_names


@pytest.fixture
def s():
    return make_stations("A", "B", "C", "D")


class TestLineConstruction:
    """Test Line.create() and Line.load()."""

    def test_create_from_first_section(self, s) -> None:
        line = Line.create(uuid.uuid4(), "Line 2", "bg-green-600", make_section(s["A"], s["B"], 5))

        assert len(line.sections) == 1
        assert [station.name for station in line.get_stations()] == ["A", "B"]

    def test_load_orders_sections(self, s) -> None:
        path = make_path(s, ("A", "B", 5), ("B", "C", 3), ("C", "D", 7))

        line = Line.load(uuid.uuid4(), "Line 2", "bg-green-600", [path[2], path[0], path[1]])

        assert station_names(line.sections) == ["A", "B", "C", "D"]


class TestLineDelegation:
    """Test that topology operations go through Sections."""

    def test_insert_section(self, s) -> None:
        line = Line.create(uuid.uuid4(), "Line 2", "bg-green-600", make_section(s["A"], s["B"], 5))

        assert line.insert_section(make_section(s["B"], s["C"], 3)) is None
        split = line.insert_section(make_section(s["A"], s["D"], 2))

        assert split is not None
        assert split.up_station == s["D"]
        assert station_names(line.sections) == ["A", "D", "B", "C"]

    def test_delete_station(self, s) -> None:
        line = Line(uuid.uuid4(), "Line 2", "bg-green-600", Sections(make_path(s, ("A", "B", 5), ("B", "C", 3))))

        result = line.delete_station(s["B"])

        assert result.is_merge is True
        assert station_names(line.sections) == ["A", "C"]

    def test_delete_station_from_single_section_line(self, s) -> None:
        line = Line.create(uuid.uuid4(), "Line 2", "bg-green-600", make_section(s["A"], s["B"], 5))

        with pytest.raises(ValidationError):
            line.delete_station(s["A"])

    def test_update_keeps_sections(self, s) -> None:
        line = Line.create(uuid.uuid4(), "Line 2", "bg-green-600", make_section(s["A"], s["B"], 5))
        sections = line.sections

        line.update("Line 9", "bg-amber-500")

        assert line.name == "Line 9"
        assert line.color == "bg-amber-500"
        assert line.sections is sections


class TestLineEquality:
    """Lines are identified by name."""

    def test_same_name_different_ids_are_equal(self, s) -> None:
        first = Line.create(uuid.uuid4(), "Line 2", "bg-green-600", make_section(s["A"], s["B"], 5))
        second = Line.create(uuid.uuid4(), "Line 2", "bg-red-600", make_section(s["C"], s["D"], 3))

        assert first == second
        assert hash(first) == hash(second)
        assert len({first, second}) == 1

    def test_different_names_are_not_equal(self, s) -> None:
        line_id = uuid.uuid4()
        first = Line.create(line_id, "Line 2", "bg-green-600", make_section(s["A"], s["B"], 5))
        second = Line.create(line_id, "Line 3", "bg-green-600", make_section(s["A"], s["B"], 5))

        assert first != second

    def test_not_equal_to_other_types(self, s) -> None:
        line = Line.create(uuid.uuid4(), "Line 2", "bg-green-600", make_section(s["A"], s["B"], 5))

        assert line != "Line 2"
