"""High-level async client for the vehicle API."""

from __future__ import annotations

from typing import Any

import aiohttp

from tesla_adapter._api import vehicle as _vehicle_api
from tesla_adapter._api.vehicle import VehicleCommand
from tesla_adapter._transport import ApiResponse, HttpTransport, Transport
from tesla_adapter.config import AdapterConfig
from tesla_adapter.exceptions import AdapterError
from tesla_adapter.models.vehicle_data import Telemetry


class VehicleApiClient:
    """Async client for the vehicle API.

    Every call takes the bearer token explicitly; the client holds no
    credential of its own.

    Usage::

        async with VehicleApiClient(config) as client:
            await client.wake_up(vehicle_id, token)
            telemetry, _ = await client.get_vehicle_data(vehicle_id, token)
    """

    def __init__(
        self,
        config: AdapterConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = transport

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> VehicleApiClient:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
            self._transport = None

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise AdapterError("Client not initialized. Use 'async with VehicleApiClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Remote operations
    # ------------------------------------------------------------------

    async def wake_up(self, vehicle_id: str, token: str | None) -> ApiResponse:
        return await _vehicle_api.wake_up(self._config, self._require_transport(), vehicle_id, token)

    async def get_vehicle_data(self, vehicle_id: str, token: str | None) -> tuple[Telemetry, ApiResponse]:
        """Fetch odometer, charge level and position for *vehicle_id*."""
        return await _vehicle_api.fetch_vehicle_data(self._config, self._require_transport(), vehicle_id, token)

    async def door_unlock(self, vehicle_id: str, token: str | None) -> ApiResponse:
        return await self._command(vehicle_id, token, VehicleCommand.DOOR_UNLOCK)

    async def door_lock(self, vehicle_id: str, token: str | None) -> ApiResponse:
        return await self._command(vehicle_id, token, VehicleCommand.DOOR_LOCK)

    async def honk_horn(self, vehicle_id: str, token: str | None) -> ApiResponse:
        return await self._command(vehicle_id, token, VehicleCommand.HONK_HORN)

    async def _command(self, vehicle_id: str, token: str | None, command: VehicleCommand) -> ApiResponse:
        return await _vehicle_api.send_command(
            self._config,
            self._require_transport(),
            vehicle_id,
            token,
            command,
        )
