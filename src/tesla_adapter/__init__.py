"""tesla_adapter - Async external adapter for the Tesla owner API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("tesla-adapter")
except PackageNotFoundError:
    __version__ = "0+local"
from tesla_adapter.client import VehicleApiClient
from tesla_adapter.config import AdapterConfig
from tesla_adapter.credentials import CredentialStore, FirestoreCredentialStore, InMemoryCredentialStore
from tesla_adapter.dispatcher import Dispatcher, JobOutcome
from tesla_adapter.exceptions import (
    AdapterConfigError,
    AdapterError,
    AdapterTransportError,
    CredentialStoreError,
    InvalidJobError,
    UnsupportedActionError,
    VehicleDataError,
)
from tesla_adapter.models import Action, JobError, JobRequest, JobResult, Telemetry

__all__ = [
    "__version__",
    "Action",
    "AdapterConfig",
    "AdapterConfigError",
    "AdapterError",
    "AdapterTransportError",
    "CredentialStore",
    "CredentialStoreError",
    "Dispatcher",
    "FirestoreCredentialStore",
    "InMemoryCredentialStore",
    "InvalidJobError",
    "JobError",
    "JobOutcome",
    "JobRequest",
    "JobResult",
    "Telemetry",
    "UnsupportedActionError",
    "VehicleApiClient",
    "VehicleDataError",
]
