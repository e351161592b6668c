"""Result descriptor returned when a station is removed from a line."""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from subway.domain.section import Section


@dataclass(frozen=True)
class UpdatedSection:
    """
    Which section row to delete and, for a merge, which row to update.

    ``survivor`` is None when a head or tail section was dropped. When an
    interior station was removed, ``survivor`` holds the left section's new
    state and ``removed_section_id`` names the right section it absorbed.
    """

    removed_section_id: uuid.UUID
    survivor: Section | None = None

    @property
    def is_merge(self) -> bool:
        return self.survivor is not None
