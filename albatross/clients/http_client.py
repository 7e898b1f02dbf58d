from __future__ import annotations

import httpx

from albatross.config import TransportConfig

USER_AGENT = "albatross-client-python/0.1.0"


def create_http_client(config: TransportConfig) -> httpx.AsyncClient:
    # Retrying happens in RetryingTransport, never in the connection pool.
    transport = httpx.AsyncHTTPTransport(retries=0)
    return httpx.AsyncClient(
        transport=transport,
        timeout=httpx.Timeout(config.timeout),
        headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
    )


async def close_http_client(client: httpx.AsyncClient) -> None:
    await client.aclose()
