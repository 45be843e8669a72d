"""Estado compartido de la aplicación: un store por tipo de entidad.

Cada :class:`EntityStore` es dueño de su caché de registros. La capa de
presentación solo lee instantáneas (:class:`Snapshot`) y modifica datos a
través de los comandos del store, que hablan con el repositorio y avisan a
los suscriptores después de cada cambio.

Los resultados se aplican en el orden en que responden las peticiones, no en
el orden en que se emitieron. La única excepción es ``refresh``: solo la
última recarga emitida puede escribir en la caché.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Any,
    Callable,
    Generic,
    Iterator,
    List,
    Mapping,
    Optional,
    Protocol,
    Tuple,
    TypeVar,
)

from consola_admin.core.errors import APIError, EntityKind, StoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Repository(Protocol[T]):
    kind: EntityKind
    update_type: type

    async def list_all(self) -> List[T]: ...

    async def create(self, payload: Any) -> T: ...

    async def update(self, record_id: str, payload: dict) -> T: ...

    async def delete(self, record_id: str) -> None: ...


class StatusKind(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class StoreStatus:
    """Estado observable del store; ``error`` solo se informa en ``ERROR``."""

    kind: StatusKind = StatusKind.IDLE
    error: Optional[StoreError] = None

    @classmethod
    def idle(cls) -> "StoreStatus":
        return cls(StatusKind.IDLE)

    @classmethod
    def loading(cls) -> "StoreStatus":
        return cls(StatusKind.LOADING)

    @classmethod
    def failed(cls, error: StoreError) -> "StoreStatus":
        return cls(StatusKind.ERROR, error)

    @property
    def is_loading(self) -> bool:
        return self.kind is StatusKind.LOADING

    @property
    def is_error(self) -> bool:
        return self.kind is StatusKind.ERROR


@dataclass(frozen=True, slots=True)
class Snapshot(Generic[T]):
    """Vista inmutable de la caché de un store en un instante."""

    records: Tuple[T, ...] = ()
    status: StoreStatus = field(default_factory=StoreStatus.idle)

    @property
    def loading(self) -> bool:
        return self.status.is_loading

    @property
    def error(self) -> Optional[StoreError]:
        return self.status.error

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[T]:
        return iter(self.records)


Listener = Callable[[Snapshot[Any]], None]


class EntityStore(Generic[T]):
    """Caché y comandos de un tipo de entidad (usuarios o publicaciones)."""

    def __init__(self, repository: Repository[T]) -> None:
        self._repository = repository
        self._records: List[T] = []
        self._status = StoreStatus.idle()
        self._listeners: List[Listener] = []
        self._pendientes = 0
        self._generacion_refresh = 0

    # ---------------------------------------------------------------- lectura
    @property
    def kind(self) -> EntityKind:
        return self._repository.kind

    @property
    def records(self) -> Tuple[T, ...]:
        return tuple(self._records)

    @property
    def status(self) -> StoreStatus:
        return self._status

    @property
    def snapshot(self) -> Snapshot[T]:
        return Snapshot(records=tuple(self._records), status=self._status)

    def get(self, record_id: str) -> Optional[T]:
        """Busca un registro en caché por id."""

        for registro in self._records:
            if registro.id == record_id:  # type: ignore[attr-defined]
                return registro
        return None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Registra un oyente y devuelve la función para darlo de baja."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ---------------------------------------------------------------- comandos
    async def refresh(self) -> Tuple[T, ...]:
        """Reemplaza la caché con la colección completa del servidor.

        Si falla, la caché se conserva y el error queda en ``status``. Una
        recarga que termina después de otra emitida más tarde se descarta.
        """

        self._generacion_refresh += 1
        generacion = self._generacion_refresh

        def _vigente() -> bool:
            return generacion == self._generacion_refresh

        with self._en_curso("refresh", vigente=_vigente):
            registros = await self._repository.list_all()
            if not _vigente():
                logger.debug(
                    "Recarga obsoleta de %s descartada (%d < %d)",
                    self.kind.value,
                    generacion,
                    self._generacion_refresh,
                )
                return self.records
            self._records = list(registros)
            logger.debug("%s: %d registros cargados", self.kind.value, len(self._records))
        return self.records

    async def create(self, payload: Any) -> T:
        """Crea un registro en el servidor y lo agrega al final de la caché."""

        with self._en_curso("create"):
            creado = await self._repository.create(payload)
            self._records.append(creado)
        return creado

    async def update(self, record_id: str, patch: Any) -> T:
        """Actualiza un registro; ``patch`` puede ser parcial.

        Acepta el tipo de actualización de la entidad o un diccionario con
        los mismos campos. Los campos omitidos se completan con la versión en
        caché.
        """

        if isinstance(patch, Mapping):
            patch = self._repository.update_type(**patch)
        payload = patch.to_payload(self.get(record_id))

        with self._en_curso("update"):
            actualizado = await self._repository.update(record_id, payload)
            for indice, registro in enumerate(self._records):
                if registro.id == record_id:  # type: ignore[attr-defined]
                    self._records[indice] = actualizado
                    break
            else:
                logger.warning(
                    "%s %s actualizado sin estar en caché; se agrega",
                    self.kind.value,
                    record_id,
                )
                self._records.append(actualizado)
        return actualizado

    async def delete(self, record_id: str) -> None:
        """Elimina un registro del servidor y de la caché.

        Borrar un usuario elimina sus publicaciones en el servidor, pero el
        store de publicaciones no se entera: quien llama debe recargarlo.
        """

        with self._en_curso("delete"):
            await self._repository.delete(record_id)
            self._records = [
                registro
                for registro in self._records
                if registro.id != record_id  # type: ignore[attr-defined]
            ]

    # ------------------------------------------------------------------ interno
    @contextmanager
    def _en_curso(
        self, operacion: str, vigente: Callable[[], bool] = lambda: True
    ) -> Iterator[None]:
        """Marca una operación en vuelo y deja el contador balanceado al salir.

        Un :class:`APIError` se convierte en :class:`StoreError`; cualquier
        otra salida (cancelación, errores inesperados) solo libera la
        operación y se propaga tal cual.
        """

        self._pendientes += 1
        try:
            self._cambiar_estado(StoreStatus.loading())
            yield
        except APIError as exc:
            raise self._fallar(operacion, exc, registrar=vigente()) from exc
        except BaseException:
            self._abandonar()
            raise
        else:
            self._terminar()

    def _terminar(self) -> None:
        self._pendientes = max(0, self._pendientes - 1)
        if self._pendientes:
            self._cambiar_estado(StoreStatus.loading())
        else:
            self._cambiar_estado(StoreStatus.idle())

    def _abandonar(self) -> None:
        self._pendientes = max(0, self._pendientes - 1)
        if not self._pendientes and self._status.is_loading:
            self._cambiar_estado(StoreStatus.idle())

    def _fallar(self, operacion: str, causa: APIError, registrar: bool = True) -> StoreError:
        error = StoreError(operacion, self.kind, causa)
        logger.warning("%s", error)
        self._pendientes = max(0, self._pendientes - 1)
        if registrar:
            self._cambiar_estado(StoreStatus.failed(error))
        elif not self._pendientes:
            self._cambiar_estado(
                self._status if self._status.is_error else StoreStatus.idle()
            )
        return error

    def _cambiar_estado(self, status: StoreStatus) -> None:
        self._status = status
        self._notificar()

    def _notificar(self) -> None:
        snapshot = self.snapshot
        for listener in list(self._listeners):
            listener(snapshot)


__all__ = [
    "EntityStore",
    "Listener",
    "Repository",
    "Snapshot",
    "StatusKind",
    "StoreStatus",
]
