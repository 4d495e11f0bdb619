from dataclasses import dataclass
from enum import Enum
from typing import Optional

import requests

from .config import REQUEST_TIMEOUT
from .table import CompatibilityVersionTable


class FetchStatus(Enum):
    CHANGED = "changed"
    NOT_MODIFIED = "not_modified"
    UNAVAILABLE = "unavailable"
    FAILED = "failed"


@dataclass(frozen=True)
class FetchResult:
    status: FetchStatus
    table: Optional[CompatibilityVersionTable] = None
    etag: Optional[str] = None
    status_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def changed(self) -> bool:
        return self.status is FetchStatus.CHANGED


def fetch_compatibility_versions(
    url: str,
    etag: Optional[str] = None,
    session: Optional[requests.Session] = None,
    timeout: float = REQUEST_TIMEOUT,
) -> FetchResult:
    """Conditionally fetch the epoch table, presenting ``etag`` as If-None-Match.

    A single attempt; transport errors and undecodable bodies come back as
    ``FAILED`` rather than raising.
    """
    headers = {"Accept": "application/json"}
    if etag:
        headers["If-None-Match"] = etag

    try:
        response = (session or requests).get(url, headers=headers, timeout=timeout)
    except requests.exceptions.RequestException as e:
        return FetchResult(FetchStatus.FAILED, error=str(e))

    if response.status_code == 304:
        return FetchResult(FetchStatus.NOT_MODIFIED, status_code=304)
    if not 200 <= response.status_code < 300:
        return FetchResult(FetchStatus.UNAVAILABLE, status_code=response.status_code)

    try:
        table = CompatibilityVersionTable.from_json(response.json())
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        return FetchResult(FetchStatus.FAILED, status_code=response.status_code, error=f"invalid body: {e}")

    return FetchResult(
        FetchStatus.CHANGED,
        table=table,
        etag=response.headers.get("ETag"),
        status_code=response.status_code,
    )
