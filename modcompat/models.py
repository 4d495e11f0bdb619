from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from packaging.version import Version

from .utils import as_utc, parse_timestamp, parse_version


class Compatibility(Enum):
    UNKNOWN = "unknown"
    OLD = "old"
    OK = "ok"


@dataclass(frozen=True)
class CompatibilityVersion:
    """An epoch boundary: the application version where mod assumptions last changed."""

    version: Version
    effective_from: datetime = field(compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "effective_from", as_utc(self.effective_from))

    def __lt__(self, other: "CompatibilityVersion") -> bool:
        return self.version < other.version

    def __le__(self, other: "CompatibilityVersion") -> bool:
        return self.version <= other.version

    def __gt__(self, other: "CompatibilityVersion") -> bool:
        return self.version > other.version

    def __ge__(self, other: "CompatibilityVersion") -> bool:
        return self.version >= other.version

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CompatibilityVersion":
        effective_from = parse_timestamp(data["effectiveFrom"])
        if effective_from is None:
            raise ValueError(f"Missing effectiveFrom for version {data['version']!r}")
        return cls(version=parse_version(data["version"]), effective_from=effective_from)

    def to_dict(self) -> Dict[str, str]:
        return {"version": str(self.version), "effectiveFrom": self.effective_from.isoformat()}

    def __str__(self) -> str:
        return str(self.version)


@dataclass(frozen=True)
class ModDefinition:
    name: str
    version: str
    release_date: datetime
    compatible_with: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "release_date", as_utc(self.release_date))

    @property
    def parsed_compatible_with(self) -> Optional[Version]:
        if not self.compatible_with:
            return None
        return parse_version(self.compatible_with)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModDefinition":
        release_date = parse_timestamp(data.get("releaseDate"))
        if release_date is None:
            raise ValueError(f"Missing releaseDate for mod {data.get('name')!r}")
        return cls(
            name=data["name"],
            version=data.get("version", ""),
            release_date=release_date,
            compatible_with=data.get("compatibleWith"),
        )
