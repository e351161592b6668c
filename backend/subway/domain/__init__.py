"""Line-topology domain model (no I/O)."""

from subway.domain.exceptions import SubwayError, TopologyError, ValidationError
from subway.domain.line import Line
from subway.domain.section import Section
from subway.domain.sections import Sections
from subway.domain.station import Station
from subway.domain.updated_section import UpdatedSection

__all__ = [
    "Line",
    "Section",
    "Sections",
    "Station",
    "SubwayError",
    "TopologyError",
    "UpdatedSection",
    "ValidationError",
]
