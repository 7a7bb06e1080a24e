"""Cliente HTTP compartido para la API REST Countries.

Todas las peticiones salen de aquí con la misma base URL, el mismo timeout
y `Accept: application/json`. En tests se inyecta un `httpx.MockTransport`.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings


def build_async_client(
    settings: AppSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea el `httpx.AsyncClient` apuntando a `api_base_url`.

    La API no impone timeout; siempre se aplica `http_timeout_seconds`.
    """

    settings = settings or AppSettings()
    # Barra final: las rutas relativas ("all", "name/...") cuelgan de /v3.1/.
    base_url = settings.api_base_url.rstrip("/") + "/"
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
        transport=transport,
    )
