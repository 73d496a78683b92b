"""Per-vehicle credential storage.

One record per vehicle id, holding the bearer token captured by the
last successful ``authenticate`` job. Records never expire; the last
write wins.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Protocol

from google.api_core import exceptions as gcp_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import firestore

from tesla_adapter._constants import TOKEN_FIELD
from tesla_adapter.config import AdapterConfig
from tesla_adapter.exceptions import CredentialStoreError

_logger = logging.getLogger(__name__)


class CredentialStore(Protocol):
    """Key-value store of bearer tokens keyed by vehicle id."""

    async def get_token(self, vehicle_id: str) -> str | None:
        """Return the stored token, or ``None`` when the vehicle has none."""
        ...

    async def put_token(self, vehicle_id: str, token: str) -> None:
        """Create or overwrite the token for *vehicle_id*."""
        ...

    async def close(self) -> None:
        """Release any client the store opened."""
        ...


class InMemoryCredentialStore:
    """Process-local store, used for tests and the local server."""

    def __init__(self, tokens: dict[str, str] | None = None) -> None:
        self._tokens: dict[str, str] = dict(tokens or {})

    async def get_token(self, vehicle_id: str) -> str | None:
        return self._tokens.get(vehicle_id)

    async def put_token(self, vehicle_id: str, token: str) -> None:
        self._tokens[vehicle_id] = token

    async def close(self) -> None:
        pass

    def __contains__(self, vehicle_id: object) -> bool:
        return vehicle_id in self._tokens


class FirestoreCredentialStore:
    """Tokens stored as Firestore documents ``<collection>/<vehicle_id>``.

    Each document has a single ``tokenToStore`` field. The Firestore
    client is created on first use so constructing the store never
    needs Google credentials.
    """

    def __init__(
        self,
        collection: str,
        *,
        project_id: str | None = None,
        client: firestore.AsyncClient | None = None,
    ) -> None:
        self._collection = collection
        self._project_id = project_id
        self._client = client
        self._owns_client = client is None

    @classmethod
    def from_config(cls, config: AdapterConfig) -> FirestoreCredentialStore:
        return cls(config.firestore_collection, project_id=config.firestore_project_id)

    def _document(self, vehicle_id: str) -> Any:
        if self._client is None:
            try:
                self._client = firestore.AsyncClient(project=self._project_id)
            except auth_exceptions.GoogleAuthError as exc:
                raise CredentialStoreError(f"Cannot create Firestore client: {exc}") from exc
        return self._client.collection(self._collection).document(vehicle_id)

    async def get_token(self, vehicle_id: str) -> str | None:
        try:
            snapshot = await self._document(vehicle_id).get()
        except (gcp_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError) as exc:
            raise CredentialStoreError(f"Error reading token for vehicle {vehicle_id}: {exc}") from exc

        if not snapshot.exists:
            return None
        data = snapshot.to_dict() or {}
        token = data.get(TOKEN_FIELD)
        return str(token) if token is not None else None

    async def put_token(self, vehicle_id: str, token: str) -> None:
        try:
            await self._document(vehicle_id).set({TOKEN_FIELD: token})
        except (gcp_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError) as exc:
            raise CredentialStoreError(f"Error storing token for vehicle {vehicle_id}: {exc}") from exc
        _logger.debug("Stored token for vehicle %s", vehicle_id)

    async def close(self) -> None:
        client = self._client
        if client is None or not self._owns_client:
            return
        self._client = None
        try:
            result = client.close()
            if inspect.isawaitable(result):
                await result
        except Exception:
            _logger.debug("Closing Firestore client failed", exc_info=True)
