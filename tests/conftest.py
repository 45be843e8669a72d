"""
Fixtures compartidas para las pruebas.

El servicio remoto se sustituye por un cliente en memoria con la misma
interfaz que ``APIClient``: asigna ids y fechas, y borra en cascada las
publicaciones de un usuario eliminado.
"""

import sys
from pathlib import Path

# Raíz del proyecto en sys.path para los imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from types import SimpleNamespace
from typing import Optional

import pytest

from consola_admin.core.config import APIConfig
from consola_admin.core.console import AdminConsole
from consola_admin.core.errors import APIError, ServerError
from consola_admin.core.state import EntityStore
from consola_admin.infrastructure.repositories import PostRepository, UserRepository


class FakeAPIClient:
    """Servicio en memoria; ``fail_with`` hace fallar la siguiente petición."""

    def __init__(self) -> None:
        self.config = APIConfig(base_url="http://api.test")
        self.users: dict = {}
        self.posts: dict = {}
        self.calls: list = []
        self.fail_with: Optional[APIError] = None
        self.online = True
        self._secuencia = 0

    # ------------------------------------------------------------ utilidades
    def seed_user(self, name: str, email: str, age: int) -> dict:
        usuario = {"id": self._nuevo_id("u"), "name": name, "email": email, "age": age}
        usuario["created_at"] = self._ahora()
        self.users[usuario["id"]] = usuario
        return dict(usuario)

    def seed_post(self, user_id: str, title: str, content: str = "") -> dict:
        post = {
            "id": self._nuevo_id("p"),
            "user_id": user_id,
            "title": title,
            "content": content,
            "created_at": self._ahora(),
        }
        self.posts[post["id"]] = post
        return dict(post)

    def _nuevo_id(self, prefijo: str) -> str:
        self._secuencia += 1
        return f"{prefijo}{self._secuencia}"

    def _ahora(self) -> str:
        return f"2024-05-01T10:00:{self._secuencia:02d}"

    def _registrar(self, nombre: str) -> None:
        self.calls.append(nombre)
        if self.fail_with is not None:
            error, self.fail_with = self.fail_with, None
            raise error

    def _no_encontrado(self, path: str) -> ServerError:
        return ServerError(f"http://api.test{path}", 404, "Not Found")

    # ---------------------------------------------------------------- usuarios
    async def list_users(self):
        self._registrar("list_users")
        return [dict(usuario) for usuario in self.users.values()]

    async def get_user(self, user_id):
        self._registrar("get_user")
        if user_id not in self.users:
            raise self._no_encontrado(f"/users/{user_id}")
        return dict(self.users[user_id])

    async def create_user(self, payload):
        self._registrar("create_user")
        return self.seed_user(payload["name"], payload["email"], payload["age"])

    async def update_user(self, user_id, payload):
        self._registrar("update_user")
        if user_id not in self.users:
            raise self._no_encontrado(f"/users/{user_id}")
        self.users[user_id].update(payload)
        return dict(self.users[user_id])

    async def delete_user(self, user_id):
        self._registrar("delete_user")
        if user_id not in self.users:
            raise self._no_encontrado(f"/users/{user_id}")
        del self.users[user_id]
        self.posts = {
            post_id: post
            for post_id, post in self.posts.items()
            if post["user_id"] != user_id
        }

    async def get_user_posts(self, user_id):
        self._registrar("get_user_posts")
        return [
            {clave: valor for clave, valor in post.items() if clave != "user_id"}
            for post in self.posts.values()
            if post["user_id"] == user_id
        ]

    # ----------------------------------------------------------- publicaciones
    async def list_posts(self):
        self._registrar("list_posts")
        return [dict(post) for post in self.posts.values()]

    async def create_post(self, payload):
        self._registrar("create_post")
        return self.seed_post(payload["user_id"], payload["title"], payload["content"])

    async def update_post(self, post_id, title=None, content=None):
        self._registrar("update_post")
        if post_id not in self.posts:
            raise self._no_encontrado(f"/posts/{post_id}")
        if title is not None:
            self.posts[post_id]["title"] = title
        if content is not None:
            self.posts[post_id]["content"] = content
        return dict(self.posts[post_id])

    async def delete_post(self, post_id):
        self._registrar("delete_post")
        if post_id not in self.posts:
            raise self._no_encontrado(f"/posts/{post_id}")
        del self.posts[post_id]

    async def check_connection(self):
        self.calls.append("check_connection")
        return self.online


@pytest.fixture
def fake_api() -> FakeAPIClient:
    """Servicio con dos usuarios y tres publicaciones."""
    api = FakeAPIClient()
    ada = api.seed_user("Ada", "ada@x.com", 30)
    alan = api.seed_user("Alan", "alan@x.com", 41)
    api.seed_post(ada["id"], "Notas", "sobre la máquina analítica")
    api.seed_post(alan["id"], "Computabilidad", "números computables")
    api.seed_post(ada["id"], "Bernoulli", "el algoritmo")
    return api


@pytest.fixture
def empty_api() -> FakeAPIClient:
    return FakeAPIClient()


@pytest.fixture
def user_store(fake_api) -> EntityStore:
    return EntityStore(UserRepository(fake_api))


@pytest.fixture
def post_store(fake_api) -> EntityStore:
    return EntityStore(PostRepository(fake_api))


@pytest.fixture
def console(fake_api, user_store, post_store) -> AdminConsole:
    return AdminConsole(api_client=fake_api, users=user_store, posts=post_store)


@pytest.fixture
def recorder():
    """Oyente que guarda cada instantánea recibida."""
    snapshots = []
    return SimpleNamespace(snapshots=snapshots, listener=snapshots.append)
