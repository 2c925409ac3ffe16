"""Reporting API used to publish dependency lists, metrics and pull requests."""

import logging
from typing import Protocol

import httpx

from .errors import ApiError
from .models import (
    CreatePullRequest,
    IncrementMetric,
    MarkAsProcessed,
    UpdatedDependencyList,
    WireModel,
)
from .serialization import DEFAULT_WIRE_FORMAT, WireFormat

logger = logging.getLogger(__name__)


class ApiHandler(Protocol):
    async def update_dependency_list(self, payload: UpdatedDependencyList) -> None: ...

    async def increment_metric(self, payload: IncrementMetric) -> None: ...

    async def create_pull_request(self, payload: CreatePullRequest) -> None: ...

    async def mark_as_processed(self, payload: MarkAsProcessed) -> None: ...


class HttpApiHandler:
    """Submit payloads to an update-job HTTP API.

    Every call POSTs ``{"data": payload}`` to
    ``{base_url}/update_jobs/{job_id}/{endpoint}``.
    """

    def __init__(
        self,
        base_url: str,
        job_id: str,
        token: str | None = None,
        client: httpx.AsyncClient | None = None,
        wire_format: WireFormat = DEFAULT_WIRE_FORMAT,
        timeout: float = 30.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.job_id = job_id
        self.token = token
        self.wire_format = wire_format
        self.timeout = timeout
        self._client = client

    async def update_dependency_list(self, payload: UpdatedDependencyList) -> None:
        await self._post("update_dependency_list", payload)

    async def increment_metric(self, payload: IncrementMetric) -> None:
        await self._post("increment_metric", payload)

    async def create_pull_request(self, payload: CreatePullRequest) -> None:
        await self._post("create_pull_request", payload)

    async def mark_as_processed(self, payload: MarkAsProcessed) -> None:
        await self._post("mark_as_processed", payload)

    async def _post(self, endpoint: str, payload: WireModel) -> None:
        url = f"{self.base_url}/update_jobs/{self.job_id}/{endpoint}"
        body = {"data": self.wire_format.to_data(payload)}
        headers = {"Authorization": self.token} if self.token else {}

        try:
            if self._client is not None:
                response = await self._client.post(url, json=body, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(url, json=body, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ApiError(f"{endpoint} failed with HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise ApiError(f"{endpoint} failed: {e}") from e

        logger.debug("POST %s -> %s", url, response.status_code)


class RecordingApiHandler:
    """Keep every API call in memory, in order, instead of sending it."""

    def __init__(self):
        self.calls: list[tuple[str, WireModel]] = []

    async def update_dependency_list(self, payload: UpdatedDependencyList) -> None:
        self.calls.append(("update_dependency_list", payload))

    async def increment_metric(self, payload: IncrementMetric) -> None:
        self.calls.append(("increment_metric", payload))

    async def create_pull_request(self, payload: CreatePullRequest) -> None:
        self.calls.append(("create_pull_request", payload))

    async def mark_as_processed(self, payload: MarkAsProcessed) -> None:
        self.calls.append(("mark_as_processed", payload))

    def payloads(self, endpoint: str) -> list[WireModel]:
        return [payload for name, payload in self.calls if name == endpoint]

    @property
    def pull_requests(self) -> list[CreatePullRequest]:
        return self.payloads("create_pull_request")

    @property
    def dependency_lists(self) -> list[UpdatedDependencyList]:
        return self.payloads("update_dependency_list")
