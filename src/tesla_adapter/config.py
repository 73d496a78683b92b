"""Adapter configuration."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from tesla_adapter.exceptions import AdapterConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class AdapterConfig:
    """Adapter configuration.

    Parameters
    ----------
    base_url : str
        Root URL of the vehicle API, e.g. ``"https://owner-api.teslamotors.com/"``.
        Endpoint paths are appended to it, so it always ends with ``/``.
    firestore_collection : str
        Firestore collection holding one token document per vehicle.
    firestore_project_id : str or None
        Google Cloud project for the credential store. ``None`` lets the
        Firestore client pick the ambient project.
    require_wake_success : bool
        When ``True`` a failed wake aborts the job before any
        action-specific call. When ``False`` the failure is logged and
        the action is attempted anyway. ``authenticate`` always requires
        a successful wake.
    """

    base_url: str
    firestore_collection: str
    firestore_project_id: str | None = None
    require_wake_success: bool = True

    def __post_init__(self) -> None:
        if not self.base_url:
            raise AdapterConfigError("base_url must not be empty")
        if not self.base_url.endswith("/"):
            object.__setattr__(self, "base_url", self.base_url + "/")

    @classmethod
    def from_env(cls, **overrides: Any) -> AdapterConfig:
        """Create configuration from environment variables.

        Reads ``BASE_URL``, ``FIRESTORE_PROJECT_ID``,
        ``FIRESTORE_COLLECTION_NAME`` and ``REQUIRE_WAKE_SUCCESS``.
        Explicit keyword arguments override environment values.

        Raises
        ------
        AdapterConfigError
            When a required value is missing from both the environment
            and *overrides*.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "BASE_URL": "base_url",
            "FIRESTORE_PROJECT_ID": "firestore_project_id",
            "FIRESTORE_COLLECTION_NAME": "firestore_collection",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val:
                config_kwargs[field_name] = val

        if "require_wake_success" not in overrides:
            config_kwargs["require_wake_success"] = _env_bool(env.get("REQUIRE_WAKE_SUCCESS"), True)

        config_kwargs.update(overrides)

        for required, env_key in (("base_url", "BASE_URL"), ("firestore_collection", "FIRESTORE_COLLECTION_NAME")):
            if not config_kwargs.get(required):
                raise AdapterConfigError(f"{env_key} is not set")

        return cls(**config_kwargs)
