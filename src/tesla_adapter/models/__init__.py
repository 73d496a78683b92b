"""Data models for job requests, results and vehicle API responses."""

from tesla_adapter.models.job import Action, ErrorDetail, JobData, JobError, JobRequest, JobResult
from tesla_adapter.models.vehicle_data import (
    ChargeState,
    DriveState,
    Telemetry,
    VehicleData,
    VehicleDataResponse,
    VehicleState,
    js_number,
    js_round,
)

__all__ = [
    "Action",
    "ChargeState",
    "DriveState",
    "ErrorDetail",
    "JobData",
    "JobError",
    "JobRequest",
    "JobResult",
    "Telemetry",
    "VehicleData",
    "VehicleDataResponse",
    "VehicleState",
    "js_number",
    "js_round",
]
