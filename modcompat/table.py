from bisect import bisect_right
from datetime import datetime
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

from packaging.version import Version

from .models import CompatibilityVersion
from .utils import as_utc


class CompatibilityVersionTable:
    """Sorted, version-unique set of epoch boundaries with nearest-not-exceeding lookups.

    Every version at or above the first entry belongs to exactly one epoch: the
    latest boundary that does not exceed it.
    """

    def __init__(self, entries: Iterable[CompatibilityVersion] = ()) -> None:
        by_version: Dict[Version, CompatibilityVersion] = {}
        for entry in entries:
            by_version[entry.version] = entry
        self._entries: List[CompatibilityVersion] = sorted(by_version.values())
        self._versions: List[Version] = [entry.version for entry in self._entries]

    def floor(self, value: Union[Version, datetime]) -> Optional[CompatibilityVersion]:
        if isinstance(value, datetime):
            return self.floor_date(value)
        return self.floor_version(value)

    def floor_version(self, value: Version) -> Optional[CompatibilityVersion]:
        index = bisect_right(self._versions, value)
        if index == 0:
            return None
        return self._entries[index - 1]

    def floor_date(self, value: datetime) -> Optional[CompatibilityVersion]:
        value = as_utc(value)
        for entry in reversed(self._entries):
            if entry.effective_from <= value:
                return entry
        return None

    @property
    def min(self) -> Optional[CompatibilityVersion]:
        return self._entries[0] if self._entries else None

    @property
    def max(self) -> Optional[CompatibilityVersion]:
        return self._entries[-1] if self._entries else None

    def is_empty(self) -> bool:
        return not self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CompatibilityVersion]:
        return iter(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CompatibilityVersionTable):
            return NotImplemented
        return [e.to_dict() for e in self._entries] == [e.to_dict() for e in other._entries]

    def __repr__(self) -> str:
        return f"CompatibilityVersionTable({[str(e) for e in self._entries]})"

    @classmethod
    def from_json(cls, data: List[Dict[str, Any]]) -> "CompatibilityVersionTable":
        if not isinstance(data, list):
            raise ValueError("compatibility versions must be a JSON array")
        return cls(CompatibilityVersion.from_dict(item) for item in data)

    def to_json(self) -> List[Dict[str, str]]:
        return [entry.to_dict() for entry in self._entries]
