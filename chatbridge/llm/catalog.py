from __future__ import annotations

import logging
from typing import Sequence

import httpx

from chatbridge.config.settings import OPENROUTER_MODELS_URL
from .errors import describe_error

logger = logging.getLogger(__name__)

DEFAULT_MODELS = ("gpt-3.5-turbo",)
CATALOG_TIMEOUT_SECONDS = 10


async def fetch_available_models(
    url: str = OPENROUTER_MODELS_URL,
    fallback: Sequence[str] = DEFAULT_MODELS,
    client: httpx.AsyncClient | None = None,
) -> list[str]:
    """
    Fetch the selectable model ids, in the order the server lists them.

    Any failure (network, HTTP status, body shape) is logged and answered
    with a copy of `fallback`, so the result is never empty.
    """
    owns_client = client is None
    client = client or httpx.AsyncClient(timeout=CATALOG_TIMEOUT_SECONDS)
    try:
        response = await client.get(url)
        response.raise_for_status()
        models = [entry["id"] for entry in response.json()["data"]]
        if not models:
            raise ValueError("model listing is empty")
        if not all(isinstance(m, str) for m in models):
            raise TypeError("model ids must be strings")
        logger.info("Model catalog: %d models from %s", len(models), url)
        return models
    except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
        logger.warning("Error fetching models from %s: %s", url, describe_error(e))
        return list(fallback)
    finally:
        if owns_client:
            await client.aclose()
