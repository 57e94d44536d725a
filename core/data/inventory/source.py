"""
core/data/inventory/source.py - Remote inventory sources

A source returns the raw ``available-resources`` payload: a mapping of
payload key (``images``, ``machineSizes``, ...) to a list of records. Sources
translate transport failures into FetchError; they never retry.

Sources:
    - RestInventorySource: GET {rest_url}/available-resources via requests
    - FileInventorySource: JSON or YAML file with the same payload
    - StaticInventorySource: in-memory payload
"""

from __future__ import annotations

import copy
import json
import logging
import threading
from pathlib import Path
from typing import Any, Protocol

import requests
import yaml  # type: ignore[import-untyped]

from core.config import settings
from core.exceptions import FetchCancelledError, FetchError

logger = logging.getLogger(__name__)


class RemoteInventorySource(Protocol):
    """Opaque fetch capability for the current inventory payload"""

    def fetch(self, cancel: threading.Event | None = None) -> Any: ...


def _check_cancel(cancel: threading.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        raise FetchCancelledError()


class RestInventorySource:
    """Fetch the inventory from the provisioning REST API

    Authentication is the transport's concern: pass a prepared
    ``requests.Session`` or a bearer token.

    Example:
        source = RestInventorySource("https://portal.example/rest", token="...")
        payload = source.fetch()
    """

    def __init__(
        self,
        rest_url: str,
        token: str | None = None,
        project_id: str | None = None,
        timeout: float = settings.API_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self._url = f"{rest_url.rstrip('/')}/{settings.REST_PATH_AVAILABLE_RESOURCES}"
        self._token = token
        self._project_id = project_id
        self._timeout = timeout
        self._session = session or requests.Session()

    @property
    def url(self) -> str:
        return self._url

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        if self._project_id:
            headers["Project"] = self._project_id
        return headers

    def fetch(self, cancel: threading.Event | None = None) -> Any:
        """Issue one GET against the available-resources endpoint

        Raises:
            FetchCancelledError: ``cancel`` was set before or during the call
            FetchError: network, authorization, HTTP or decoding failure
        """
        _check_cancel(cancel)

        try:
            response = self._session.get(self._url, headers=self._headers(), timeout=self._timeout)
        except requests.Timeout as e:
            raise FetchError(f"timed out after {self._timeout}s", reason=FetchError.NETWORK, cause=e) from e
        except requests.RequestException as e:
            raise FetchError(f"GET {self._url}", reason=FetchError.NETWORK, cause=e) from e

        _check_cancel(cancel)

        status = response.status_code
        if status in (401, 403):
            raise FetchError(
                f"GET {self._url} returned {status} {response.text.strip()}",
                reason=FetchError.AUTHORIZATION,
                status_code=status,
            )
        if status >= 400:
            raise FetchError(
                f"GET {self._url} returned {status} {response.text.strip()}",
                reason=FetchError.HTTP,
                status_code=status,
            )

        try:
            return response.json()
        except ValueError as e:
            raise FetchError("response is not valid JSON", reason=FetchError.DECODING, cause=e) from e

    def __repr__(self) -> str:
        return f"RestInventorySource(url={self._url!r})"


class FileInventorySource:
    """Read the inventory payload from a file

    ``.json`` files are parsed as JSON, anything else as YAML.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def fetch(self, cancel: threading.Event | None = None) -> Any:
        _check_cancel(cancel)
        try:
            with self._path.open(encoding="utf-8") as f:
                if self._path.suffix.lower() == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except OSError as e:
            raise FetchError(f"cannot read {self._path}", reason=FetchError.IO, cause=e) from e
        except UnicodeDecodeError as e:
            raise FetchError(f"{self._path} is not valid UTF-8", reason=FetchError.DECODING, cause=e) from e
        except json.JSONDecodeError as e:
            raise FetchError(f"cannot parse {self._path}", reason=FetchError.DECODING, cause=e) from e
        except yaml.YAMLError as e:
            raise FetchError(f"cannot parse {self._path}", reason=FetchError.DECODING, cause=e) from e

        logger.debug("loaded inventory payload from %s", self._path)
        return data

    def __repr__(self) -> str:
        return f"FileInventorySource(path={str(self._path)!r})"


class StaticInventorySource:
    """In-memory payload, replaceable between refreshes"""

    def __init__(self, payload: Any = None):
        self._payload = payload if payload is not None else {}
        self.fetch_count = 0

    def set_payload(self, payload: Any) -> None:
        self._payload = payload

    def fetch(self, cancel: threading.Event | None = None) -> Any:
        _check_cancel(cancel)
        self.fetch_count += 1
        return copy.deepcopy(self._payload)
