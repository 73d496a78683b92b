"""Vehicle data response and the telemetry string derived from it."""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict

from tesla_adapter._constants import LAT_LONG_MULTIPLICATION_FACTOR


def js_round(value: float) -> int:
    """Round half up, matching JavaScript's ``Math.round``.

    Python's :func:`round` rounds half to even, so ``round(0.5) == 0``
    while ``Math.round(0.5) === 1``.
    """
    return math.floor(value + 0.5)


def js_number(value: int | float) -> str:
    """Render *value* the way JavaScript string interpolation would.

    Integral floats drop the trailing ``.0``; other floats use the
    shortest round-trip digits. JavaScript switches to exponent form
    only below ``1e-6`` or from ``1e21``, and writes ``1e-7`` where
    Python writes ``1e-07``.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    text = repr(value)
    if "e" not in text:
        return text
    mantissa, exponent = text.split("e")
    power = int(exponent)
    if -7 < power < 21:
        return format(Decimal(text), "f")
    return f"{mantissa}e{'+' if power > 0 else '-'}{abs(power)}"


class _Section(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class VehicleState(_Section):
    odometer: float


class ChargeState(_Section):
    battery_level: int | float


class DriveState(_Section):
    longitude: float
    latitude: float


class VehicleData(_Section):
    """The subset of ``vehicle_data`` the telemetry string needs."""

    vehicle_state: VehicleState
    charge_state: ChargeState
    drive_state: DriveState


class VehicleDataResponse(_Section):
    """Envelope returned by ``GET api/1/vehicles/{id}/vehicle_data``."""

    response: VehicleData


class Telemetry(BaseModel):
    """Telemetry values in their on-chain encoding.

    Parameters
    ----------
    odometer : int
        Odometer rounded to a whole unit.
    battery_level : int or float
        Charge level as reported.
    longitude : float
        Longitude multiplied by ``LAT_LONG_MULTIPLICATION_FACTOR``.
    latitude : float
        Latitude multiplied by ``LAT_LONG_MULTIPLICATION_FACTOR``.
    """

    model_config = ConfigDict(frozen=True)

    odometer: int
    battery_level: int | float
    longitude: float
    latitude: float

    @classmethod
    def from_vehicle_data(cls, data: VehicleData) -> Telemetry:
        return cls(
            odometer=js_round(data.vehicle_state.odometer),
            battery_level=data.charge_state.battery_level,
            longitude=data.drive_state.longitude * LAT_LONG_MULTIPLICATION_FACTOR,
            latitude=data.drive_state.latitude * LAT_LONG_MULTIPLICATION_FACTOR,
        )

    def encode(self) -> str:
        """Return ``{odometer,battery,longitude,latitude}``.

        Field order is positional and consumed as-is downstream.
        """
        fields: tuple[Any, ...] = (self.odometer, self.battery_level, self.longitude, self.latitude)
        return "{" + ",".join(js_number(v) for v in fields) + "}"
