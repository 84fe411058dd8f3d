import logging
from collections.abc import Mapping
from typing import Any

import httpx


logger = logging.getLogger(__name__)


class InvalidPayloadError(Exception):
    """Raised when the contributions API body is not a JSON object."""


async def fetch_contribution_data(
    username: str,
    api_url: str,
    timeout: float = 15.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    """Fetch the raw contribution payload for `username`.

    The request is made once. Status errors, transport errors and bodies
    that are not JSON propagate to the caller unchanged.
    """

    url = f"{api_url}{username}"
    logger.debug("Fetching contributions from %s", url)

    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        response = await client.get(
            url,
            headers={
                "Accept": "application/json",
                "User-Agent": "contribution-graph",
            },
        )
    response.raise_for_status()

    payload: Any = response.json()
    if not isinstance(payload, Mapping):
        raise InvalidPayloadError("Contributions API response is invalid")

    return dict(payload)
