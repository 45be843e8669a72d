"""Implementaciones de repositorios para acceso a datos.

Convierten el JSON del :class:`APIClient` en modelos tipados.
"""

from __future__ import annotations

from typing import Any, Callable, List, TypeVar

from consola_admin.core.errors import EntityKind, InvalidPayloadError
from consola_admin.infrastructure.api_client import APIClient
from consola_admin.models.post import Post, PostCreate, PostUpdate
from consola_admin.models.user import User, UserCreate, UserUpdate

T = TypeVar("T")


def _a_usuario(datos: Any) -> User:
    return User(
        id=str(datos["id"]),
        name=datos["name"],
        email=datos["email"],
        age=int(datos["age"]),
        created_at=str(datos.get("created_at") or ""),
    )


def _a_publicacion(datos: Any, user_id: str | None = None) -> Post:
    return Post(
        id=str(datos["id"]),
        user_id=str(user_id if user_id is not None else datos["user_id"]),
        title=datos["title"],
        content=datos.get("content") or "",
        created_at=str(datos.get("created_at") or ""),
    )


def _convertir(datos: Any, conversor: Callable[[Any], T], entidad: str) -> T:
    try:
        return conversor(datos)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise InvalidPayloadError(
            f"Formato inesperado al leer {entidad}: {exc!r}"
        ) from exc


def _convertir_lista(datos: Any, conversor: Callable[[Any], T], entidad: str) -> List[T]:
    if not isinstance(datos, list):
        raise InvalidPayloadError(f"Se esperaba una lista de {entidad}.")
    return [_convertir(item, conversor, entidad) for item in datos]


class UserRepository:
    """Repositorio de usuarios basado en un cliente API."""

    kind = EntityKind.USERS
    update_type = UserUpdate

    def __init__(self, api_client: APIClient) -> None:
        self._api_client = api_client

    async def list_all(self) -> list[User]:
        """Devuelve la lista completa de usuarios en el orden del servidor."""

        usuarios_crudos = await self._api_client.list_users()
        return _convertir_lista(usuarios_crudos, _a_usuario, "usuarios")

    async def get(self, user_id: str) -> User:
        datos = await self._api_client.get_user(user_id)
        return _convertir(datos, _a_usuario, "usuario")

    async def create(self, payload: UserCreate) -> User:
        datos = await self._api_client.create_user(payload.to_payload())
        return _convertir(datos, _a_usuario, "usuario")

    async def update(self, user_id: str, payload: dict) -> User:
        datos = await self._api_client.update_user(user_id, payload)
        return _convertir(datos, _a_usuario, "usuario")

    async def delete(self, user_id: str) -> None:
        await self._api_client.delete_user(user_id)


class PostRepository:
    """Repositorio de publicaciones basado en un cliente API."""

    kind = EntityKind.POSTS
    update_type = PostUpdate

    def __init__(self, api_client: APIClient) -> None:
        self._api_client = api_client

    async def list_all(self) -> list[Post]:
        publicaciones = await self._api_client.list_posts()
        return _convertir_lista(publicaciones, _a_publicacion, "publicaciones")

    async def list_by_user(self, user_id: str) -> list[Post]:
        """Publicaciones de un usuario.

        El servicio omite ``user_id`` en esta consulta; se completa con el id
        solicitado.
        """

        publicaciones = await self._api_client.get_user_posts(user_id)
        return _convertir_lista(
            publicaciones,
            lambda datos: _a_publicacion(datos, user_id=user_id),
            "publicaciones",
        )

    async def create(self, payload: PostCreate) -> Post:
        datos = await self._api_client.create_post(payload.to_payload())
        return _convertir(datos, _a_publicacion, "publicación")

    async def update(self, post_id: str, payload: dict) -> Post:
        datos = await self._api_client.update_post(
            post_id,
            title=payload.get("title"),
            content=payload.get("content"),
        )
        return _convertir(datos, _a_publicacion, "publicación")

    async def delete(self, post_id: str) -> None:
        await self._api_client.delete_post(post_id)


__all__ = ["PostRepository", "UserRepository"]
