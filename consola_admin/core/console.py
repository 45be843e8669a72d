"""Fachada que agrupa los stores de usuarios y publicaciones.

Los stores no se conocen entre sí. Las operaciones que afectan a ambos
(como borrar un usuario, que en el servidor borra también sus publicaciones)
se coordinan aquí de forma explícita.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from consola_admin.core.config import APIConfig
from consola_admin.core.services import (
    DashboardStats,
    dashboard_stats,
    resolve_foreign_name,
)
from consola_admin.core.state import EntityStore
from consola_admin.infrastructure.api_client import APIClient
from consola_admin.infrastructure.repositories import PostRepository, UserRepository
from consola_admin.models.post import Post
from consola_admin.models.user import User

logger = logging.getLogger(__name__)


@dataclass
class AdminConsole:
    api_client: APIClient
    users: EntityStore[User]
    posts: EntityStore[Post]

    @classmethod
    def from_config(cls, config: APIConfig) -> "AdminConsole":
        """Crea el cliente, los repositorios y los stores a partir de ``config``."""

        api_client = APIClient(config)
        return cls(
            api_client=api_client,
            users=EntityStore(UserRepository(api_client)),
            posts=EntityStore(PostRepository(api_client)),
        )

    async def check_connection(self) -> bool:
        return await self.api_client.check_connection()

    async def refresh_all(self) -> None:
        """Recarga ambos stores en paralelo.

        Si alguno falla se propaga el primer error, después de que los dos
        hayan terminado.
        """

        resultados = await asyncio.gather(
            self.users.refresh(), self.posts.refresh(), return_exceptions=True
        )
        for resultado in resultados:
            if isinstance(resultado, BaseException):
                raise resultado

    async def delete_user(self, user_id: str) -> None:
        """Borra un usuario y recarga las publicaciones.

        El servidor elimina en cascada las publicaciones del usuario; la
        recarga es lo que las quita de la caché local.
        """

        await self.users.delete(user_id)
        logger.debug("Usuario %s eliminado; recargando publicaciones", user_id)
        await self.posts.refresh()

    def author_of(self, post: Post) -> str:
        return resolve_foreign_name(self.users.snapshot, post.user_id)

    def dashboard(self, recent: int = 5) -> DashboardStats:
        return dashboard_stats(self.users.snapshot, self.posts.snapshot, recent=recent)


__all__ = ["AdminConsole"]
