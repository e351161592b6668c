"""Station value object."""

import uuid
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Station:
    """A station on a line. Identity is the id; the name is display only."""

    id: uuid.UUID
    name: str = field(compare=False)

    def __repr__(self) -> str:
        """String representation of the station."""
        return f"<Station(id={self.id}, name={self.name})>"
