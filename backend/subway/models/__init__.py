"""Database models for the subway line service."""

# Import all models to register them with SQLAlchemy metadata
from subway.models.base import Base, BaseModel
from subway.models.subway import Line, Section, Station

__all__ = [
    # Base
    "Base",
    "BaseModel",
    # Subway models
    "Line",
    "Section",
    "Station",
]
