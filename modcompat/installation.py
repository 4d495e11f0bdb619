from pathlib import Path
from typing import Iterable, Optional, Tuple

from packaging.version import Version

from .config import VERSION_FILE_CANDIDATES
from .exceptions import InvalidVersionFormat, VersionFileNotFound, VersionReadFailure
from .utils import parse_version, read_first_line


def find_version_file(base_path: Path, candidates: Iterable[str] = VERSION_FILE_CANDIDATES) -> Optional[Path]:
    # The tool lives beside the game install, so candidates resolve against the base dir's parent.
    for candidate in candidates:
        path = base_path.parent / candidate
        try:
            if path.exists():
                return path
        except OSError as e:
            raise VersionReadFailure(f"Could not check for application version file {path}") from e
    return None


def read_installed_version(
    base_path: Path, candidates: Iterable[str] = VERSION_FILE_CANDIDATES
) -> Tuple[str, Version]:
    """Return the raw version token and its parsed form from the first existing version file."""
    candidates = tuple(candidates)
    path = find_version_file(base_path, candidates)
    if path is None:
        searched = ", ".join(str(base_path.parent / c) for c in candidates)
        raise VersionFileNotFound(f"Could not find the application version file (searched: {searched})")

    try:
        line = read_first_line(path)
    except (OSError, UnicodeDecodeError) as e:
        raise VersionReadFailure(f"Could not read application version from {path}") from e

    if line is None or not line.split():
        raise VersionReadFailure(f"Application version file {path} was empty")

    raw = line.split()[0]
    try:
        return raw, parse_version(raw)
    except InvalidVersionFormat as e:
        raise VersionReadFailure(f"Could not read application version from {path}") from e
