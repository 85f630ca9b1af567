"""HTTP client for the IBC boiler's embedded web API.

Every request is a GET on ``cgi-bin/bc2-cgi`` carrying one ``json`` query
parameter that names the requested object.  The answer is a JSON object
decoded into one of the record types in ``core.records``.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx

from core.exceptions import BoilerConnectionError, BoilerResponseError
from core.records import (
    BoilerData,
    BoilerErrorLogEntry,
    BoilerExtDetailData,
    BoilerFactoryData,
    BoilerLogData,
    BoilerStandardData,
    BoilerStatusData,
    LoadStatusData,
    RequestType,
    from_payload,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

CGI_PATH = "cgi-bin/bc2-cgi"
OBJECT_NO = 100


def build_request_object(
    request: int, boiler_no: int = 0, load_no: int = 0, object_index: int = 0
) -> str:
    """Encode the compact JSON request object sent in the ``json`` parameter.

    ``load_no`` is only included when non-zero.
    """
    obj: Dict[str, int] = {
        "object_no": OBJECT_NO,
        "object_request": int(request),
        "boiler_no": boiler_no,
    }
    if load_no:
        obj["load_no"] = load_no
    obj["object_index"] = object_index
    return json.dumps(obj, separators=(",", ":"))


class BoilerClient:
    """Queries a single IBC boiler.

    Parameters
    ----------
    base_url : str
        Boiler address, e.g. ``"http://192.168.10.2/"``.
    timeout : float
        Per-request timeout in seconds.
    retries : int
        Extra attempts after a request fails to reach the boiler;
        0 disables retrying.
    retry_delay : float
        Seconds to wait between attempts.
    transport : httpx.BaseTransport, optional
        Custom transport (used by tests).
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        retries: int = 1,
        retry_delay: float = 1.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        sep = "" if base_url.endswith("/") else "/"
        self._url = f"{base_url}{sep}{CGI_PATH}"
        self._attempts = max(0, retries) + 1
        self._retry_delay = retry_delay
        self._client = httpx.Client(timeout=timeout, transport=transport)

    @property
    def url(self) -> str:
        return self._url

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "BoilerClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # -- raw access ----------------------------------------------------------

    def get_data(self, request: int) -> Any:
        """Query the boiler and return the decoded JSON answer."""
        return self._get(build_request_object(request))

    def get_data_for_load(self, request: int, load_no: int) -> Any:
        """Query the boiler about a specific load and return the decoded JSON answer."""
        return self._get(build_request_object(request, load_no=load_no))

    # -- typed getters -------------------------------------------------------

    def get_boiler_status_data(self) -> BoilerStatusData:
        return self._get_record(BoilerStatusData, RequestType.BOILER_STATUS_DATA)

    def get_boiler_log_data(self) -> BoilerLogData:
        return self._get_record(BoilerLogData, RequestType.BOILER_LOG_DATA)

    def get_boiler_error_log_entry(self, index: int) -> BoilerErrorLogEntry:
        """Return entry *index* of the boiler's error log."""
        return self._get_record(
            BoilerErrorLogEntry, RequestType.BOILER_ERROR_LOG_DATA, object_index=index
        )

    def get_boiler_data(self) -> BoilerData:
        return self._get_record(BoilerData, RequestType.BOILER_DATA)

    def get_boiler_standard_data(self) -> BoilerStandardData:
        return self._get_record(BoilerStandardData, RequestType.BOILER_STANDARD_DATA)

    def get_boiler_ext_detail_data(self) -> BoilerExtDetailData:
        return self._get_record(BoilerExtDetailData, RequestType.BOILER_EXT_DETAIL_DATA)

    def get_boiler_factory_data(self) -> BoilerFactoryData:
        return self._get_record(BoilerFactoryData, RequestType.BOILER_FACTORY_DATA)

    def get_load_status_data_for_load(self, load_no: int) -> LoadStatusData:
        return self._get_record(LoadStatusData, RequestType.LOAD_STATUS_DATA, load_no=load_no)

    def get_load_status_data(self) -> List[LoadStatusData]:
        """Return the status of every configured load (type > 0), in load order."""
        standard = self.get_boiler_standard_data()
        return [
            self.get_load_status_data_for_load(load_no)
            for load_no, load_type in enumerate(standard.load_types(), start=1)
            if load_type > 0
        ]

    # -- internal ------------------------------------------------------------

    def _get_record(
        self, cls: Type[T], request: int, load_no: int = 0, object_index: int = 0
    ) -> T:
        payload = self._get(
            build_request_object(request, load_no=load_no, object_index=object_index)
        )
        return from_payload(cls, payload)

    def _get(self, request_json: str) -> Any:
        resp = self._send(request_json)
        if resp.status_code >= 300:
            raise BoilerResponseError(
                f"{self._url} returned HTTP {resp.status_code} for {request_json}"
            )
        try:
            return resp.json()
        except ValueError as exc:
            raise BoilerResponseError(f"Malformed JSON from {self._url}: {exc}") from exc

    def _send(self, request_json: str) -> httpx.Response:
        attempt = 1
        while True:
            try:
                return self._client.get(self._url, params={"json": request_json})
            except httpx.TransportError as exc:
                logger.warning(
                    "Boiler request to %s failed (attempt %d/%d): %s",
                    self._url, attempt, self._attempts, exc,
                )
                if attempt >= self._attempts:
                    raise BoilerConnectionError(
                        f"Cannot reach boiler at {self._url}: {exc}"
                    ) from exc
            attempt += 1
            time.sleep(self._retry_delay)
