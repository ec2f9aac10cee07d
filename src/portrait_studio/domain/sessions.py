"""Domain models for in-progress generation sessions."""

from dataclasses import dataclass, field
from enum import StrEnum


class ImageRole(StrEnum):
    """Role an uploaded photo plays in a generation request."""

    BASE = "base"
    REFERENCE = "reference"


@dataclass
class Session:
    """Volatile per-user request state; never persisted."""

    model_name: str | None = None
    base_images: list[str] = field(default_factory=list)
    ref_images: list[str] = field(default_factory=list)
