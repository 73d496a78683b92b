"""Vehicle endpoints.

Endpoints (relative to ``AdapterConfig.base_url``):
  - api/1/vehicles/{id}/wake_up (POST)
  - api/1/vehicles/{id}/vehicle_data (GET)
  - api/1/vehicles/{id}/command/door_unlock (POST)
  - api/1/vehicles/{id}/command/door_lock (POST)
  - api/1/vehicles/{id}/command/honk_horn (POST)

The vehicle must be woken before any of the other endpoints succeed.
"""

from __future__ import annotations

import enum
import logging

from pydantic import ValidationError

from tesla_adapter._constants import (
    DOOR_LOCK_PATH,
    DOOR_UNLOCK_PATH,
    HONK_HORN_PATH,
    VEHICLE_DATA_PATH,
    WAKE_UP_PATH,
)
from tesla_adapter._transport import ApiResponse, Transport
from tesla_adapter.config import AdapterConfig
from tesla_adapter.exceptions import VehicleDataError
from tesla_adapter.models.vehicle_data import Telemetry, VehicleDataResponse

_logger = logging.getLogger(__name__)


class VehicleCommand(enum.StrEnum):
    """Command endpoint names under ``api/1/vehicles/{id}/command/``."""

    DOOR_UNLOCK = "door_unlock"
    DOOR_LOCK = "door_lock"
    HONK_HORN = "honk_horn"


_COMMAND_PATHS: dict[VehicleCommand, str] = {
    VehicleCommand.DOOR_UNLOCK: DOOR_UNLOCK_PATH,
    VehicleCommand.DOOR_LOCK: DOOR_LOCK_PATH,
    VehicleCommand.HONK_HORN: HONK_HORN_PATH,
}


def build_headers(token: str | None) -> dict[str, str]:
    """Build request headers for *token*.

    A missing token still produces a ``Bearer`` header so the remote
    answers with an authorization error.
    """
    return {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {token or ''}".rstrip(),
    }


def build_url(config: AdapterConfig, path_template: str, vehicle_id: str) -> str:
    return config.base_url + path_template.format(vehicle_id=vehicle_id)


async def wake_up(
    config: AdapterConfig,
    transport: Transport,
    vehicle_id: str,
    token: str | None,
) -> ApiResponse:
    """Wake the vehicle so it accepts further requests."""
    url = build_url(config, WAKE_UP_PATH, vehicle_id)
    return await transport.request("POST", url, headers=build_headers(token))


def parse_vehicle_data(body: object) -> Telemetry:
    """Extract telemetry from a ``vehicle_data`` response body."""
    try:
        parsed = VehicleDataResponse.model_validate(body)
    except ValidationError as exc:
        raise VehicleDataError(f"Vehicle data response is missing telemetry fields: {exc}") from exc
    return Telemetry.from_vehicle_data(parsed.response)


async def fetch_vehicle_data(
    config: AdapterConfig,
    transport: Transport,
    vehicle_id: str,
    token: str | None,
) -> tuple[Telemetry, ApiResponse]:
    """Fetch vehicle data, returning the parsed telemetry and the raw response."""
    url = build_url(config, VEHICLE_DATA_PATH, vehicle_id)
    response = await transport.request("GET", url, headers=build_headers(token))
    telemetry = parse_vehicle_data(response.body)
    _logger.debug("Telemetry for vehicle %s: %s", vehicle_id, telemetry)
    return telemetry, response


async def send_command(
    config: AdapterConfig,
    transport: Transport,
    vehicle_id: str,
    token: str | None,
    command: VehicleCommand,
) -> ApiResponse:
    """POST a vehicle command."""
    url = build_url(config, _COMMAND_PATHS[command], vehicle_id)
    return await transport.request("POST", url, headers=build_headers(token))
