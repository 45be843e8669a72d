"""Jerarquía de errores de la consola.

Los fallos del servicio remoto se expresan como excepciones tipadas. Todas
heredan de :class:`ConsolaError`, de modo que un único ``except`` basta para
capturar cualquier problema de red o de servidor.
"""

from __future__ import annotations

from enum import Enum


class EntityKind(str, Enum):
    """Tipos de entidad administrados por la consola."""

    USERS = "users"
    POSTS = "posts"


class ConsolaError(Exception):
    """Error base de la aplicación."""


class APIError(ConsolaError):
    """Fallo al comunicarse con el servicio remoto."""


class NetworkError(APIError):
    """La petición no llegó al servidor o no obtuvo respuesta.

    Cubre conexiones rechazadas, errores de DNS y timeouts.
    """

    def __init__(self, url: str, reason: object) -> None:
        super().__init__(f"No se pudo conectar a {url}: {reason}")
        self.url = url
        self.reason = reason


class ServerError(APIError):
    """El servidor respondió con un estado fuera del rango 2xx."""

    def __init__(self, url: str, status: int, reason: object = "") -> None:
        detalle = f" ({reason})" if reason else ""
        super().__init__(f"Error HTTP {status} en {url}{detalle}")
        self.url = url
        self.status = status
        self.reason = reason


class InvalidPayloadError(APIError):
    """Respuesta 2xx con un cuerpo que no se puede interpretar."""


class StoreError(ConsolaError):
    """Fallo de un comando del store, con la operación y la entidad afectadas."""

    def __init__(self, operation: str, kind: EntityKind, cause: APIError) -> None:
        super().__init__(f"Falló '{operation}' sobre {kind.value}: {cause}")
        self.operation = operation
        self.kind = kind
        self.cause = cause


__all__ = [
    "APIError",
    "ConsolaError",
    "EntityKind",
    "InvalidPayloadError",
    "NetworkError",
    "ServerError",
    "StoreError",
]
