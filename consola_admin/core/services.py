"""Vistas derivadas calculadas a partir de instantáneas de los stores.

Funciones puras: no modifican lo que reciben, no hacen I/O y con las mismas
instantáneas devuelven siempre el mismo resultado. Aceptan un
:class:`~consola_admin.core.state.Snapshot` o cualquier secuencia de
registros.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, List, Sequence, Tuple, TypeVar, Union

from consola_admin.core.state import Snapshot
from consola_admin.models.post import Post
from consola_admin.models.user import User

T = TypeVar("T")

UNKNOWN_USER = "Usuario desconocido"

# Las fechas que no se pueden interpretar quedan al final.
_FECHA_MINIMA = datetime.min.replace(tzinfo=timezone.utc)

# fromisoformat de 3.10 solo admite 3 o 6 decimales en los segundos.
_FRACCION = re.compile(r"(?<=\d\d:\d\d:\d\d)\.(\d+)")

Records = Union[Snapshot[T], Sequence[T]]


def _registros(snapshot: Records[T]) -> Tuple[T, ...]:
    if isinstance(snapshot, Snapshot):
        return snapshot.records
    return tuple(snapshot)


def parse_timestamp(value: object) -> datetime:
    """Interpreta ``created_at`` (ISO-8601) como fecha con zona horaria.

    Las fechas sin zona se asumen en UTC.
    """

    if isinstance(value, datetime):
        fecha = value
    elif isinstance(value, str) and value.strip():
        candidate = value.strip().replace("Z", "+00:00")
        candidate = _FRACCION.sub(
            lambda m: "." + m.group(1)[:6].ljust(6, "0"), candidate
        )
        try:
            fecha = datetime.fromisoformat(candidate)
        except ValueError:
            return _FECHA_MINIMA
    else:
        return _FECHA_MINIMA
    if fecha.tzinfo is None:
        return fecha.replace(tzinfo=timezone.utc)
    return fecha


def count_of(snapshot: Records[Any]) -> int:
    return len(_registros(snapshot))


def average_of(snapshot: Records[T], selector: Callable[[T], float]) -> float:
    """Promedio del campo elegido; 0 si no hay registros."""

    registros = _registros(snapshot)
    if not registros:
        return 0.0
    return sum(selector(registro) for registro in registros) / len(registros)


def ratio_of(numerator: Records[Any], denominator: Records[Any]) -> float:
    """Cantidad de ``numerator`` por cada registro de ``denominator``.

    Devuelve 0 si ``denominator`` está vacío.
    """

    total = count_of(denominator)
    if total == 0:
        return 0.0
    return count_of(numerator) / total


def most_recent(snapshot: Records[T], n: int) -> List[T]:
    """Los ``n`` registros más recientes según ``created_at``.

    El orden es estable: ante fechas iguales se respeta el de la instantánea.
    """

    if n <= 0:
        return []
    ordenados = sorted(
        _registros(snapshot),
        key=lambda registro: parse_timestamp(getattr(registro, "created_at", None)),
        reverse=True,
    )
    return ordenados[:n]


def resolve_foreign_name(users: Records[User], user_id: str) -> str:
    """Nombre del usuario con ``user_id`` o :data:`UNKNOWN_USER` si no está."""

    for usuario in _registros(users):
        if usuario.id == user_id:
            return usuario.name
    return UNKNOWN_USER


def posts_of(posts: Records[Post], user_id: str) -> List[Post]:
    return [post for post in _registros(posts) if post.user_id == user_id]


@dataclass(frozen=True, slots=True)
class DashboardStats:
    """Resumen que muestra el panel principal."""

    total_users: int
    total_posts: int
    average_age: float
    posts_per_user: float
    recent_posts: Tuple[Post, ...]

    def as_dict(self) -> dict:
        return {
            "total_users": self.total_users,
            "total_posts": self.total_posts,
            "average_age": self.average_age,
            "posts_per_user": self.posts_per_user,
            "recent_posts": [
                {
                    "id": post.id,
                    "user_id": post.user_id,
                    "title": post.title,
                    "created_at": post.created_at,
                }
                for post in self.recent_posts
            ],
        }


def dashboard_stats(
    users: Records[User], posts: Records[Post], recent: int = 5
) -> DashboardStats:
    """Calcula los indicadores del panel con un decimal, como se muestran."""

    return DashboardStats(
        total_users=count_of(users),
        total_posts=count_of(posts),
        average_age=round(average_of(users, lambda usuario: usuario.age), 1),
        posts_per_user=round(ratio_of(posts, users), 1),
        recent_posts=tuple(most_recent(posts, recent)),
    )


__all__ = [
    "DashboardStats",
    "UNKNOWN_USER",
    "average_of",
    "count_of",
    "dashboard_stats",
    "most_recent",
    "parse_timestamp",
    "posts_of",
    "ratio_of",
    "resolve_foreign_name",
]
