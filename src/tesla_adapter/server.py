"""Standalone HTTP server exposing the dispatcher.

``POST /`` with a job request as JSON; the response carries the job
payload and the outcome's status. Run with::

    python -m tesla_adapter.server
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import AsyncIterator

import aiohttp
from aiohttp import web

from tesla_adapter.client import VehicleApiClient
from tesla_adapter.config import AdapterConfig
from tesla_adapter.credentials import CredentialStore, FirestoreCredentialStore
from tesla_adapter.dispatcher import Dispatcher, errored_outcome
from tesla_adapter.exceptions import InvalidJobError

_logger = logging.getLogger(__name__)

DISPATCHER_KEY: web.AppKey[Dispatcher] = web.AppKey("dispatcher", Dispatcher)


async def _handle_job(request: web.Request) -> web.Response:
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        outcome = errored_outcome(None, InvalidJobError(f"Body is not valid JSON: {exc}"))
    else:
        outcome = await request.app[DISPATCHER_KEY].handle(payload)
    return web.json_response(outcome.payload, status=outcome.status_code)


def create_app(
    config: AdapterConfig,
    store: CredentialStore | None = None,
    *,
    session: aiohttp.ClientSession | None = None,
) -> web.Application:
    """Build the web application.

    The vehicle API client is opened on startup and closed on cleanup,
    together with the Firestore store when none is passed in.
    """
    app = web.Application()
    owns_store = store is None
    credential_store = store if store is not None else FirestoreCredentialStore.from_config(config)

    async def _client_ctx(app: web.Application) -> AsyncIterator[None]:
        try:
            async with VehicleApiClient(config, session=session) as client:
                app[DISPATCHER_KEY] = Dispatcher(config, client, credential_store)
                yield
        finally:
            if owns_store:
                await credential_store.close()

    app.cleanup_ctx.append(_client_ctx)
    app.router.add_post("/", _handle_job)
    return app


def main() -> None:
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
    config = AdapterConfig.from_env()
    port = int(os.environ.get("PORT", "8080"))
    _logger.info("Listening on port %s", port)
    web.run_app(create_app(config), port=port)


if __name__ == "__main__":
    main()
