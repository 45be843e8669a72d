"""Cliente HTTP del servicio de usuarios y publicaciones.

Cada método realiza exactamente una petición y devuelve el JSON decodificado.
Las peticiones son bloqueantes (``urllib``); los métodos públicos son
corrutinas que las ejecutan con :func:`asyncio.to_thread`, de modo que el
llamador solo se suspende mientras espera la red.

No hay reintentos ni caché: eso queda en manos de quien llama.
"""

from __future__ import annotations

import asyncio
import http.client
import json
import logging
from typing import Any, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from consola_admin.core.config import APIConfig
from consola_admin.core.errors import (
    APIError,
    InvalidPayloadError,
    NetworkError,
    ServerError,
)

logger = logging.getLogger(__name__)

# Caracteres que encodeURIComponent deja sin escapar.
_QUERY_SAFE = "-_.!~*'()"


def encode_query_value(value: str) -> str:
    """Codifica un valor de query string igual que ``encodeURIComponent``."""

    return quote(str(value), safe=_QUERY_SAFE)


class APIClient:
    """Acceso HTTP a los recursos ``/users`` y ``/posts``."""

    def __init__(self, config: APIConfig) -> None:
        self._config = config

    @property
    def config(self) -> APIConfig:
        return self._config

    # ---------------------------------------------------------------- usuarios
    async def list_users(self) -> Any:
        return await self._call("GET", "/users/")

    async def get_user(self, user_id: str) -> Any:
        return await self._call("GET", f"/users/{user_id}")

    async def create_user(self, payload: dict) -> Any:
        return await self._call("POST", "/users/", body=payload)

    async def update_user(self, user_id: str, payload: dict) -> Any:
        return await self._call("PUT", f"/users/{user_id}", body=payload)

    async def delete_user(self, user_id: str) -> None:
        """Elimina un usuario; el servidor borra también sus publicaciones."""

        await self._call("DELETE", f"/users/{user_id}")

    async def get_user_posts(self, user_id: str) -> Any:
        return await self._call("GET", f"/users/{user_id}/posts")

    # ----------------------------------------------------------- publicaciones
    async def list_posts(self) -> Any:
        return await self._call("GET", "/posts/")

    async def create_post(self, payload: dict) -> Any:
        return await self._call("POST", "/posts/", body=payload)

    async def update_post(
        self,
        post_id: str,
        title: Optional[str] = None,
        content: Optional[str] = None,
    ) -> Any:
        """Actualiza una publicación.

        El servicio espera ``title`` y ``content`` como parámetros de la URL,
        no en el cuerpo.
        """

        params = []
        if title is not None:
            params.append(f"title={encode_query_value(title)}")
        if content is not None:
            params.append(f"content={encode_query_value(content)}")
        path = f"/posts/{post_id}"
        if params:
            path = f"{path}?{'&'.join(params)}"
        return await self._call("PUT", path)

    async def delete_post(self, post_id: str) -> None:
        await self._call("DELETE", f"/posts/{post_id}")

    # ------------------------------------------------------------------ estado
    async def check_connection(self) -> bool:
        """Indica si el servicio responde en ``/`` con un estado 2xx."""

        try:
            await self._call("GET", "/", decode=False)
        except APIError as exc:
            logger.debug("Servicio no disponible: %s", exc)
            return False
        return True

    # ------------------------------------------------------------------ interno
    async def _call(
        self,
        method: str,
        path: str,
        *,
        body: Optional[dict] = None,
        decode: bool = True,
    ) -> Any:
        return await asyncio.to_thread(self._request, method, path, body, decode)

    def _request(
        self, method: str, path: str, body: Optional[dict], decode: bool
    ) -> Any:
        url = self._config.url(path)
        headers = {"Accept": "application/json"}
        data = None
        if body is not None:
            data = json.dumps(body).encode("utf-8")
            headers["Content-Type"] = "application/json"
        elif method == "PUT":
            headers["Content-Type"] = "application/json"

        logger.debug("%s %s", method, url)
        request = Request(url, data=data, method=method, headers=headers)
        try:
            with urlopen(request, timeout=self._config.timeout) as response:
                raw_data = response.read()
                status = getattr(response, "status", 200)
        except HTTPError as exc:
            raise ServerError(url, exc.code, exc.reason) from exc
        except URLError as exc:
            raise NetworkError(url, exc.reason) from exc
        except http.client.HTTPException as exc:
            # cuerpo incompleto o conexión cerrada por el servidor
            raise NetworkError(url, exc) from exc
        except OSError as exc:
            # timeouts durante la lectura y conexiones cortadas
            raise NetworkError(url, exc) from exc

        if not 200 <= status < 300:
            raise ServerError(url, status)
        if not decode or not raw_data:
            return None
        try:
            return json.loads(raw_data)
        except ValueError as exc:
            # JSONDecodeError y UnicodeDecodeError
            raise InvalidPayloadError(
                f"Respuesta inválida de {url} ({exc})."
            ) from exc


__all__ = ["APIClient", "encode_query_value"]
