import logging
import os
from dataclasses import dataclass, field
from typing import Tuple

logger = logging.getLogger(__name__)

VERSIONS_URL = "https://raw.githubusercontent.com/WulfMarius/Mod-Installer/master/tld-versions.json"
STATE_FILENAME = "compatibility-state.json"
DEFAULT_STATE_RESOURCE = "default-compatibility-state.json"
REQUEST_TIMEOUT = 10.0  # seconds

# Relative to the parent of the tool's base directory, probed in order.
VERSION_FILE_CANDIDATES: Tuple[str, ...] = (
    "tld_Data/StreamingAssets/version.txt",
    "tld.app/Contents/Resources/Data/StreamingAssets/version.txt",
)


@dataclass(frozen=True)
class Settings:
    versions_url: str = VERSIONS_URL
    state_filename: str = STATE_FILENAME
    request_timeout: float = REQUEST_TIMEOUT
    version_file_candidates: Tuple[str, ...] = field(default=VERSION_FILE_CANDIDATES)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings, letting MODCOMPAT_* environment variables override the defaults."""
        timeout = REQUEST_TIMEOUT
        raw_timeout = os.environ.get("MODCOMPAT_TIMEOUT")
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                logger.warning("Invalid MODCOMPAT_TIMEOUT %r, using %s", raw_timeout, REQUEST_TIMEOUT)
        return cls(
            versions_url=os.environ.get("MODCOMPAT_VERSIONS_URL", VERSIONS_URL),
            request_timeout=timeout,
        )
