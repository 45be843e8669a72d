"""Modelos de publicación."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Post:
    """Publicación de un usuario.

    ``user_id`` se fija al crearla y no se modifica después.
    """

    id: str
    user_id: str
    title: str
    content: str
    created_at: str


@dataclass(frozen=True, slots=True)
class PostCreate:
    user_id: str
    title: str
    content: str

    def to_payload(self) -> dict:
        return {"user_id": self.user_id, "title": self.title, "content": self.content}


@dataclass(frozen=True, slots=True)
class PostUpdate:
    """Solo ``title`` y ``content`` son editables."""

    title: str | None = None
    content: str | None = None

    def to_payload(self, actual: Post | None = None) -> dict:
        campos = {"title": self.title, "content": self.content}
        if actual is not None:
            for nombre, valor in campos.items():
                if valor is None:
                    campos[nombre] = getattr(actual, nombre)
        return {nombre: valor for nombre, valor in campos.items() if valor is not None}


__all__ = ["Post", "PostCreate", "PostUpdate"]
