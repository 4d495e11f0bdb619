import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import requests
from packaging.version import Version

from .cache import CompatibilityCache
from .config import Settings
from .installation import read_installed_version
from .models import Compatibility, CompatibilityVersion, ModDefinition
from .remote_api import FetchResult, FetchStatus, fetch_compatibility_versions
from .state import CompatibilityState, load_state, save_state

logger = logging.getLogger(__name__)

VERSION_UNKNOWN = "unknown"


@dataclass(frozen=True)
class _Snapshot:
    state: CompatibilityState
    current_epoch: Optional[CompatibilityVersion]


class CompatibilityResolver:
    """Decides whether mods match the epoch of the locally installed application.

    State is published as an immutable snapshot and swapped as a whole, so
    concurrent :meth:`get_compatibility` callers never see a table and an
    epoch from different refreshes.
    """

    def __init__(
        self,
        base_path: Path,
        session: Optional[requests.Session] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.base_path = Path(base_path)
        self.session = session
        self.settings = settings or Settings()
        self._cache: CompatibilityCache[ModDefinition, Compatibility] = CompatibilityCache()
        self._current_version = VERSION_UNKNOWN
        self._parsed_current_version: Optional[Version] = None

        result = load_state(self.state_path)
        if result.error:
            logger.warning("Could not load compatibility state, using %s state: %s", result.source.value, result.error)
        else:
            logger.debug("Loaded %s compatibility state", result.source.value)
        self._snapshot = _Snapshot(result.state, None)

    @property
    def state_path(self) -> Path:
        return self.base_path / self.settings.state_filename

    @property
    def current_epoch(self) -> Optional[CompatibilityVersion]:
        return self._snapshot.current_epoch

    def get_current_version(self) -> str:
        return self._current_version

    def get_state(self) -> CompatibilityState:
        return self._snapshot.state

    def initialize(self) -> None:
        """Read the installed version, then try one refresh of the epoch table.

        Raises VersionFileNotFound or VersionReadFailure when the local version
        cannot be determined; refresh problems only degrade to stale data.
        """
        self.read_current_version()
        self.refresh()

    def read_current_version(self) -> None:
        raw, parsed = read_installed_version(self.base_path, self.settings.version_file_candidates)
        self._current_version = raw
        self._parsed_current_version = parsed
        self._publish(self._snapshot.state)
        logger.info("Installed application version %s, epoch %s", raw, self.current_epoch or "unknown")
        self._write_state()

    def refresh(self) -> FetchResult:
        state = self._snapshot.state
        result = fetch_compatibility_versions(
            self.settings.versions_url,
            etag=state.etag,
            session=self.session,
            timeout=self.settings.request_timeout,
        )

        if result.changed:
            logger.info("Fetched %d compatibility versions", len(result.table))
            state = replace(state, table=result.table, etag=result.etag)
        elif result.status is FetchStatus.NOT_MODIFIED:
            logger.debug("Compatibility versions not modified")
        elif result.status is FetchStatus.UNAVAILABLE:
            logger.warning("Compatibility versions unavailable (HTTP %s)", result.status_code)
        else:
            logger.warning("Could not refresh compatibility versions: %s", result.error)

        self._publish(replace(state, checked=datetime.now(timezone.utc)))
        if result.changed:
            self.invalidate()
        self._write_state()
        return result

    def invalidate(self) -> None:
        self._cache.clear()

    def get_compatibility(self, mod: ModDefinition) -> Compatibility:
        return self._cache.get_or_compute(mod, self._calculate_compatibility)

    def _calculate_compatibility(self, mod: ModDefinition) -> Compatibility:
        snapshot = self._snapshot
        if snapshot.current_epoch is None:
            return Compatibility.UNKNOWN

        table = snapshot.state.table
        compatible_with = mod.parsed_compatible_with
        if compatible_with is not None:
            mod_epoch = table.floor(compatible_with)
        else:
            mod_epoch = table.floor(mod.release_date)

        # Same epoch only; a mod built for a newer epoch than the install is OLD too.
        if mod_epoch == snapshot.current_epoch:
            return Compatibility.OK
        return Compatibility.OLD

    def _publish(self, state: CompatibilityState) -> None:
        current_epoch = None
        if self._parsed_current_version is not None:
            current_epoch = state.table.floor(self._parsed_current_version)
        self._snapshot = _Snapshot(state, current_epoch)

    def _write_state(self) -> None:
        error = save_state(self.state_path, self._snapshot.state)
        if error:
            logger.warning("Could not save compatibility state to %s: %s", self.state_path, error)
