"""Request dispatcher.

Turns one job request into exactly one :class:`JobOutcome`. The sequence
is strictly linear:

1. parse the job and map its action (unknown and unimplemented actions
   end here, before any remote call);
2. resolve the bearer token, from the job for ``authenticate`` and from
   the credential store otherwise;
3. wake the vehicle;
4. run the action-specific calls.

Every failure is turned into an errored payload carrying the job id, so
callers always receive a single answer.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from tesla_adapter._constants import DEFAULT_ERROR_STATUS
from tesla_adapter._redact import redact_for_log
from tesla_adapter._transport import ApiResponse
from tesla_adapter.client import VehicleApiClient
from tesla_adapter.config import AdapterConfig
from tesla_adapter.credentials import CredentialStore
from tesla_adapter.exceptions import AdapterError, InvalidJobError, UnsupportedActionError
from tesla_adapter.models.job import Action, JobError, JobRequest, JobResult

_logger = logging.getLogger(__name__)

#: Actions in the job vocabulary that this adapter does not serve yet.
UNIMPLEMENTED_ACTIONS: frozenset[Action] = frozenset({Action.VEHICLES})


@dataclass(frozen=True, slots=True)
class JobOutcome:
    """The single result of a job: HTTP-style status plus response payload."""

    status_code: int
    payload: dict[str, Any]


def parse_job(payload: Any) -> tuple[JobRequest, Action]:
    """Validate *payload* and resolve its action.

    Raises
    ------
    InvalidJobError
        When the payload does not have the job request shape, or an
        ``authenticate`` job has no ``apiToken``.
    UnsupportedActionError
        When the action is unknown (400) or not implemented (501).
    """
    try:
        job = JobRequest.model_validate(payload)
    except ValidationError as exc:
        raise InvalidJobError(f"Invalid job request: {exc.error_count()} validation error(s)") from exc

    try:
        action = Action(job.data.action)
    except ValueError:
        raise UnsupportedActionError(job.data.action) from None

    if action in UNIMPLEMENTED_ACTIONS:
        raise UnsupportedActionError(action.value, known=True)

    if action is Action.AUTHENTICATE and not job.data.api_token:
        raise InvalidJobError("authenticate requires apiToken")

    return job, action


def errored_outcome(job_run_id: Any, exc: BaseException) -> JobOutcome:
    """Build the errored outcome for *exc*.

    The status comes from the exception when it carries one (a remote
    response status, or 400/501 for rejected jobs), otherwise 500.
    """
    status = getattr(exc, "status_code", None) or DEFAULT_ERROR_STATUS
    if isinstance(exc, UnsupportedActionError):
        _logger.info("Job %s not served: %s", job_run_id, exc)
    else:
        _logger.warning("Job %s errored (%s): %s", job_run_id, status, exc)
    error = JobError.from_exception(job_run_id, exc, status)
    return JobOutcome(status_code=status, payload=error.to_payload())


def _job_run_id(payload: Any) -> Any:
    if isinstance(payload, Mapping):
        return payload.get("id")
    return None


class Dispatcher:
    """Run job requests against the vehicle API.

    Parameters
    ----------
    config : AdapterConfig
        Adapter configuration. ``require_wake_success`` decides whether a
        failed wake aborts non-authenticate jobs.
    client : VehicleApiClient
        An entered vehicle API client.
    store : CredentialStore
        Token storage keyed by vehicle id.
    """

    def __init__(
        self,
        config: AdapterConfig,
        client: VehicleApiClient,
        store: CredentialStore,
    ) -> None:
        self._config = config
        self._client = client
        self._store = store
        self._actions: dict[Action, Callable[[JobRequest, str | None, ApiResponse | None], Awaitable[JobResult]]] = {
            Action.WAKE_UP: self._wake_up,
            Action.VEHICLE_DATA: self._vehicle_data,
            Action.UNLOCK: self._unlock,
            Action.LOCK: self._lock,
            Action.HONK_HORN: self._honk_horn,
        }

    async def handle(self, payload: Any) -> JobOutcome:
        """Run one job and return its outcome. Never raises for job failures."""
        job_run_id = _job_run_id(payload)
        _logger.debug("Job received: %s", redact_for_log(payload))

        try:
            job, action = parse_job(payload)
            result = await self._run(job, action)
        except AdapterError as exc:
            return errored_outcome(job_run_id, exc)
        except Exception as exc:
            _logger.exception("Unexpected error while running job %s", job_run_id)
            return errored_outcome(job_run_id, exc)

        return JobOutcome(status_code=result.status_code, payload=result.to_payload())

    # ------------------------------------------------------------------
    # Job sequence
    # ------------------------------------------------------------------

    async def _run(self, job: JobRequest, action: Action) -> JobResult:
        token = await self._resolve_token(job, action)
        wake = await self._wake(job, action, token)

        if action is Action.AUTHENTICATE:
            assert wake is not None  # noqa: S101
            return await self._authenticate(job, wake)

        return await self._actions[action](job, token, wake)

    async def _resolve_token(self, job: JobRequest, action: Action) -> str | None:
        if action is Action.AUTHENTICATE:
            return job.data.api_token

        token = await self._store.get_token(job.data.vehicle_id)
        if token is None:
            _logger.warning("No stored token for vehicle %s", job.data.vehicle_id)
        return token

    async def _wake(self, job: JobRequest, action: Action, token: str | None) -> ApiResponse | None:
        """Wake the vehicle.

        Returns ``None`` only when the wake failed and the configuration
        allows the action to go ahead anyway.
        """
        try:
            return await self._client.wake_up(job.data.vehicle_id, token)
        except AdapterError as exc:
            if action in (Action.AUTHENTICATE, Action.WAKE_UP) or self._config.require_wake_success:
                raise
            _logger.warning(
                "Wake failed for vehicle %s, continuing with %s: %s",
                job.data.vehicle_id,
                action.value,
                exc,
            )
            return None

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def _authenticate(self, job: JobRequest, wake: ApiResponse) -> JobResult:
        assert job.data.api_token is not None  # noqa: S101
        await self._store.put_token(job.data.vehicle_id, job.data.api_token)
        return JobResult(
            jobRunID=job.id,
            data=job.data.address,
            result=job.data.address,
            statusCode=wake.status,
        )

    async def _wake_up(self, job: JobRequest, _token: str | None, wake: ApiResponse | None) -> JobResult:
        assert wake is not None  # noqa: S101
        return _success(job, wake)

    async def _vehicle_data(self, job: JobRequest, token: str | None, _wake: ApiResponse | None) -> JobResult:
        telemetry, response = await self._client.get_vehicle_data(job.data.vehicle_id, token)
        return JobResult(jobRunID=job.id, data=telemetry.encode(), result=None, statusCode=response.status)

    async def _unlock(self, job: JobRequest, token: str | None, _wake: ApiResponse | None) -> JobResult:
        # The on-chain side logs the vehicle state alongside the command.
        telemetry, _ = await self._client.get_vehicle_data(job.data.vehicle_id, token)
        response = await self._client.door_unlock(job.data.vehicle_id, token)
        return JobResult(jobRunID=job.id, data=telemetry.encode(), result=None, statusCode=response.status)

    async def _lock(self, job: JobRequest, token: str | None, _wake: ApiResponse | None) -> JobResult:
        telemetry, _ = await self._client.get_vehicle_data(job.data.vehicle_id, token)
        response = await self._client.door_lock(job.data.vehicle_id, token)
        return JobResult(jobRunID=job.id, data=telemetry.encode(), result=None, statusCode=response.status)

    async def _honk_horn(self, job: JobRequest, token: str | None, _wake: ApiResponse | None) -> JobResult:
        response = await self._client.honk_horn(job.data.vehicle_id, token)
        return _success(job, response)


def _success(job: JobRequest, response: ApiResponse) -> JobResult:
    """Generic success result.

    A JSON object body becomes ``data`` with its ``result`` key forced
    present; a falsy ``result`` is normalised to ``None``. The same value
    is echoed at the top level.
    """
    body = response.body
    if not isinstance(body, Mapping):
        return JobResult(jobRunID=job.id, data=body, result=None, statusCode=response.status)
    data = dict(body)
    data["result"] = data.get("result") or None
    return JobResult(jobRunID=job.id, data=data, result=data["result"], statusCode=response.status)
