"""Custom exception hierarchy for tesla_adapter."""

from __future__ import annotations


class AdapterError(Exception):
    """Base exception for all adapter errors.

    ``status_code`` is the HTTP status reported back to the caller when
    the error ends a job.
    """

    status_code: int | None = 500


class AdapterConfigError(AdapterError):
    """Invalid or missing configuration."""


class AdapterTransportError(AdapterError):
    """HTTP-level failure (network, non-2xx, invalid JSON).

    ``status_code`` is the remote's status when a response was received
    and ``None`` when the request never got one.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class CredentialStoreError(AdapterError):
    """Credential lookup or write failed."""


class VehicleDataError(AdapterError):
    """Vehicle data response is missing a telemetry field."""


class InvalidJobError(AdapterError):
    """Inbound job request is malformed."""

    status_code = 400


class UnsupportedActionError(AdapterError):
    """Job names an action this adapter does not serve.

    Known but unimplemented actions report ``501``; anything outside the
    action set reports ``400``.
    """

    def __init__(self, action: str, *, known: bool = False) -> None:
        self.action = action
        self.status_code = 501 if known else 400
        if known:
            message = f"Action not yet implemented: {action}"
        else:
            message = f"Invalid action: {action}"
        super().__init__(message)
