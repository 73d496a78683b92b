"""Invocation wrappers.

Each wrapper converts its platform's request shape into a job payload,
runs it through :func:`run_job` and converts the single outcome back:

* :func:`gcp_service` - Google Cloud Functions HTTP trigger.
* :func:`lambda_handler` - AWS Lambda direct invocation; the event is the job.
* :func:`lambda_handler_v2` - AWS Lambda proxy integration; the job is a
  JSON string in ``event["body"]``.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import json
import logging
from typing import Any

import aiohttp
import functions_framework

from tesla_adapter.client import VehicleApiClient
from tesla_adapter.config import AdapterConfig
from tesla_adapter.credentials import CredentialStore, FirestoreCredentialStore
from tesla_adapter.dispatcher import Dispatcher, JobOutcome, errored_outcome
from tesla_adapter.exceptions import AdapterConfigError, InvalidJobError

_logger = logging.getLogger(__name__)

_JSON_HEADERS = {"Content-Type": "application/json"}


async def run_job(
    payload: Any,
    *,
    config: AdapterConfig | None = None,
    store: CredentialStore | None = None,
    session: aiohttp.ClientSession | None = None,
) -> JobOutcome:
    """Run one job with a freshly built dispatcher.

    Configuration comes from the environment unless given. The default
    credential store is Firestore; a store built here is closed before
    returning.
    """
    job_run_id = payload.get("id") if isinstance(payload, dict) else None
    try:
        config = config or AdapterConfig.from_env()
    except AdapterConfigError as exc:
        return errored_outcome(job_run_id, exc)

    owned_store: CredentialStore | None = None
    if store is None:
        store = owned_store = FirestoreCredentialStore.from_config(config)

    _logger.debug("Running job %s", job_run_id)

    try:
        async with VehicleApiClient(config, session=session) as client:
            return await Dispatcher(config, client, store).handle(payload)
    finally:
        if owned_store is not None:
            await owned_store.close()


def _run_sync(payload: Any) -> JobOutcome:
    return asyncio.run(run_job(payload))


@functions_framework.http
def gcp_service(request: Any) -> tuple[str, int, dict[str, str]]:
    """Google Cloud Functions entrypoint. The request body is the job."""
    payload = request.get_json(silent=True)
    outcome = _run_sync(payload)
    return json.dumps(outcome.payload), outcome.status_code, dict(_JSON_HEADERS)


def lambda_handler(event: Any, context: Any) -> dict[str, Any]:
    """AWS Lambda entrypoint returning the payload only."""
    return _run_sync(event).payload


def _decode_proxy_body(event: Any) -> Any:
    if not isinstance(event, dict):
        raise InvalidJobError("Lambda event is not an object")
    body = event.get("body")
    if body is None:
        raise InvalidJobError("Lambda event has no body")
    if event.get("isBase64Encoded"):
        try:
            body = base64.b64decode(body).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise InvalidJobError(f"Body is not valid base64: {exc}") from exc
    try:
        return json.loads(body)
    except (TypeError, json.JSONDecodeError) as exc:
        raise InvalidJobError(f"Body is not valid JSON: {exc}") from exc


def lambda_handler_v2(event: Any, context: Any) -> dict[str, Any]:
    """AWS Lambda proxy integration entrypoint.

    Returns ``{"statusCode", "body", "isBase64Encoded"}`` with the
    payload JSON-encoded in ``body``.
    """
    try:
        payload = _decode_proxy_body(event)
    except InvalidJobError as exc:
        outcome = errored_outcome(None, exc)
    else:
        outcome = _run_sync(payload)

    return {
        "statusCode": outcome.status_code,
        "headers": dict(_JSON_HEADERS),
        "body": json.dumps(outcome.payload),
        "isBase64Encoded": False,
    }
