"""Job request and job result models.

Inbound jobs arrive as ``{"id": ..., "data": {...}}`` with camelCase keys.
Results go back with the exact key spelling the job runner expects
(``jobRunID``, ``statusCode``), so every result model dumps with
``by_alias=True``.
"""

from __future__ import annotations

import enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Action(enum.StrEnum):
    """Actions a job may request."""

    AUTHENTICATE = "authenticate"
    VEHICLES = "vehicles"
    WAKE_UP = "wake_up"
    VEHICLE_DATA = "vehicle_data"
    UNLOCK = "unlock"
    LOCK = "lock"
    HONK_HORN = "honk_horn"


class JobData(BaseModel):
    """The ``data`` object of a job request.

    ``action`` stays a plain string here; the dispatcher maps it onto
    :class:`Action` so unknown values become an explicit error result
    instead of a validation failure.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    vehicle_id: str
    action: str
    api_token: str | None = None
    address: str | None = None

    @field_validator("vehicle_id", mode="before")
    @classmethod
    def _coerce_vehicle_id(cls, value: Any) -> Any:
        # Vehicle ids are large integers and may arrive unquoted.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class JobRequest(BaseModel):
    """A single inbound job."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: Any = None
    data: JobData


class JobResult(BaseModel):
    """Successful job result."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    job_run_id: Any = Field(alias="jobRunID")
    data: Any = None
    result: Any = None
    status_code: int = Field(alias="statusCode")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class ErrorDetail(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    message: str


class JobError(BaseModel):
    """Errored job result."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    job_run_id: Any = Field(alias="jobRunID")
    status: Literal["errored"] = "errored"
    error: ErrorDetail
    status_code: int = Field(alias="statusCode")

    @classmethod
    def from_exception(cls, job_run_id: Any, exc: BaseException, status_code: int) -> JobError:
        return cls(
            jobRunID=job_run_id,
            error=ErrorDetail(name=type(exc).__name__, message=str(exc)),
            statusCode=status_code,
        )

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
