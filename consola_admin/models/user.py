"""Modelos de usuario."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class User:
    """Usuario tal como lo devuelve el servicio.

    ``id`` y ``created_at`` los asigna el servidor y no cambian nunca.
    """

    id: str
    name: str
    email: str
    age: int
    created_at: str


@dataclass(frozen=True, slots=True)
class UserCreate:
    """Datos necesarios para registrar un usuario."""

    name: str
    email: str
    age: int

    def to_payload(self) -> dict:
        return {"name": self.name, "email": self.email, "age": self.age}


@dataclass(frozen=True, slots=True)
class UserUpdate:
    """Cambios parciales sobre un usuario existente."""

    name: str | None = None
    email: str | None = None
    age: int | None = None

    def to_payload(self, actual: User | None = None) -> dict:
        """Devuelve el cuerpo del PUT completando lo que falte con ``actual``."""

        campos = {"name": self.name, "email": self.email, "age": self.age}
        if actual is not None:
            for nombre, valor in campos.items():
                if valor is None:
                    campos[nombre] = getattr(actual, nombre)
        return {nombre: valor for nombre, valor in campos.items() if valor is not None}


__all__ = ["User", "UserCreate", "UserUpdate"]
