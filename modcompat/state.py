"""Persisted compatibility state and its load/save chain.

The state file mirrors the bundled default resource::

    {"compatibilityVersions": [{"version": "1.56", "effectiveFrom": "..."}],
     "etag": "\"abc\"", "checked": "2024-01-01T00:00:00+00:00"}
"""
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Optional

from .config import DEFAULT_STATE_RESOURCE
from .table import CompatibilityVersionTable
from .utils import format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompatibilityState:
    table: CompatibilityVersionTable = field(default_factory=CompatibilityVersionTable)
    checked: Optional[datetime] = None
    etag: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CompatibilityState":
        return cls(
            table=CompatibilityVersionTable.from_json(data.get("compatibilityVersions") or []),
            checked=parse_timestamp(data.get("checked")),
            etag=data.get("etag"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "compatibilityVersions": self.table.to_json(),
            "etag": self.etag,
            "checked": format_timestamp(self.checked),
        }


class StateSource(Enum):
    PERSISTED = "persisted"
    BUNDLED = "bundled"
    EMPTY = "empty"


@dataclass(frozen=True)
class LoadResult:
    state: CompatibilityState
    source: StateSource
    error: Optional[str] = None


# Malformed entries surface as any of these while decoding.
_DECODE_ERRORS = (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError)


def _read_persisted(path: Path) -> CompatibilityState:
    return CompatibilityState.from_dict(json.loads(path.read_text(encoding="utf-8")))


def _read_bundled() -> CompatibilityState:
    text = resources.files("modcompat").joinpath("data").joinpath(DEFAULT_STATE_RESOURCE).read_text(encoding="utf-8")
    return CompatibilityState.from_dict(json.loads(text))


def load_state(path: Path) -> LoadResult:
    """Load the persisted state, else the bundled default, else an empty state. Never raises."""
    errors = []
    try:
        if path.exists():
            return LoadResult(_read_persisted(path), StateSource.PERSISTED)
    except (OSError, *_DECODE_ERRORS) as e:
        errors.append(f"{path}: {e}")

    try:
        return LoadResult(_read_bundled(), StateSource.BUNDLED, "; ".join(errors) or None)
    except (OSError, ModuleNotFoundError, *_DECODE_ERRORS) as e:
        errors.append(f"bundled default: {e}")

    return LoadResult(CompatibilityState(), StateSource.EMPTY, "; ".join(errors))


def save_state(path: Path, state: CompatibilityState) -> Optional[str]:
    """Write ``state`` to ``path``. Returns an error message instead of raising."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(state.to_dict(), indent=2), encoding="utf-8")
    except (OSError, TypeError, ValueError) as e:
        return str(e)
    logger.debug("Saved compatibility state to %s", path)
    return None
