import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from packaging import version
from packaging.version import Version
from rich.console import Console

from .exceptions import InvalidVersionFormat

console = Console()


def parse_version(text: str) -> Version:
    """Parse the first whitespace-delimited token of ``text`` into a comparable Version.

    Versions compare by their PEP 440 decomposition, so a leading ``v`` and
    trailing zero release segments do not change identity: ``v1.0``, ``1.0``
    and ``1.0.0`` are the same version.
    """
    if not isinstance(text, str):
        raise InvalidVersionFormat(text)
    tokens = text.split()
    if not tokens:
        raise InvalidVersionFormat(text)
    try:
        return version.parse(tokens[0])
    except version.InvalidVersion as e:
        raise InvalidVersionFormat(tokens[0]) from e


def parse_timestamp(value: Union[str, int, float, None]) -> Optional[datetime]:
    """Parse an ISO-8601 string or epoch milliseconds (as older state files store them)."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise TypeError(f"Invalid timestamp: {value!r}")
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, timezone.utc)
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return as_utc(datetime.fromisoformat(value))


def as_utc(moment: datetime) -> datetime:
    # Naive datetimes are taken to be UTC so they compare with aware ones.
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def format_timestamp(moment: Optional[datetime]) -> Optional[str]:
    return as_utc(moment).isoformat() if moment else None


def load_mod_manifest(manifest_file: str) -> List[Dict[str, Any]]:
    with open(manifest_file, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{manifest_file} must contain a JSON array of mods")
    return data


def read_first_line(path: Path) -> Optional[str]:
    with open(path, "r", encoding="utf-8") as f:
        line = f.readline()
    return line or None
