from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

from tesla_adapter import credentials
from tesla_adapter._transport import ApiResponse
from tesla_adapter.config import AdapterConfig

VEHICLE_ID = "23423423423423423423"

VEHICLE_DATA_BODY: dict[str, Any] = {
    "response": {
        "id": 23423423423423423423,
        "state": "online",
        "vehicle_state": {"odometer": 12345.6, "locked": True},
        "charge_state": {"battery_level": 77, "charging_state": "Disconnected"},
        "drive_state": {"longitude": -122.419416, "latitude": 37.774929, "heading": 90},
    }
}

COMMAND_BODY: dict[str, Any] = {"response": {"reason": "", "result": True}}


class RoutingTransport:
    """Fake transport answering by the last URL segment and recording every call."""

    def __init__(self, overrides: Mapping[str, ApiResponse | BaseException] | None = None) -> None:
        self.responses: dict[str, ApiResponse | BaseException] = {
            "wake_up": ApiResponse(status=200, body={"response": {"state": "online"}}),
            "vehicle_data": ApiResponse(status=200, body=VEHICLE_DATA_BODY),
            "door_unlock": ApiResponse(status=200, body=COMMAND_BODY),
            "door_lock": ApiResponse(status=200, body=COMMAND_BODY),
            "honk_horn": ApiResponse(status=200, body=COMMAND_BODY),
        }
        self.responses.update(overrides or {})
        self.calls: list[tuple[str, str, dict[str, str]]] = []

    async def request(self, method: str, url: str, *, headers: Mapping[str, str]) -> ApiResponse:
        name = url.rsplit("/", 1)[-1]
        self.calls.append((method, url, dict(headers)))
        outcome = self.responses[name]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    @property
    def endpoints(self) -> list[str]:
        return [url.rsplit("/", 1)[-1] for _method, url, _headers in self.calls]


@pytest.fixture
def config() -> AdapterConfig:
    return AdapterConfig(base_url="https://vehicles.example/", firestore_collection="tokens")


class _Snapshot:
    def __init__(self, data: dict[str, Any] | None) -> None:
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> dict[str, Any] | None:
        return self._data


class _DocumentRef:
    def __init__(self, docs: dict[str, dict[str, Any]], key: str, error: Exception | None) -> None:
        self._docs = docs
        self._key = key
        self._error = error

    async def get(self) -> _Snapshot:
        if self._error is not None:
            raise self._error
        return _Snapshot(self._docs.get(self._key))

    async def set(self, data: dict[str, Any]) -> None:
        if self._error is not None:
            raise self._error
        self._docs[self._key] = dict(data)


class _Collection:
    def __init__(self, client: FakeFirestore, name: str) -> None:
        self._client = client
        self._name = name

    def document(self, document_id: str) -> _DocumentRef:
        docs = self._client.collections.setdefault(self._name, {})
        return _DocumentRef(docs, document_id, self._client.error)


class FakeFirestore:
    """Stand-in for ``firestore.AsyncClient`` keeping documents in dicts."""

    def __init__(self, project: str | None = None, *, error: Exception | None = None) -> None:
        self.project = project
        self.collections: dict[str, dict[str, dict[str, Any]]] = {}
        self.error = error
        self.close_calls = 0

    def collection(self, name: str) -> _Collection:
        return _Collection(self, name)

    def close(self) -> None:
        self.close_calls += 1


@pytest.fixture
def firestore_clients(monkeypatch: pytest.MonkeyPatch) -> list[FakeFirestore]:
    """Make ``firestore.AsyncClient`` build fakes and record each one."""
    created: list[FakeFirestore] = []

    def _factory(project: str | None = None, **_kwargs: Any) -> FakeFirestore:
        client = FakeFirestore(project)
        created.append(client)
        return client

    monkeypatch.setattr(credentials.firestore, "AsyncClient", _factory)
    return created
