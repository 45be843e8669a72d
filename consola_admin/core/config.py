"""Configuración de acceso al servicio remoto."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

DEFAULT_API_URL = "http://localhost:8000"
DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True, slots=True)
class APIConfig:
    """Parámetros de conexión compartidos por el cliente API.

    Se construye una sola vez al arrancar y se pasa por referencia a quien
    la necesite.
    """

    base_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        # frozen: se normaliza con object.__setattr__
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        if self.timeout <= 0:
            raise ValueError("El timeout debe ser mayor que cero.")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "APIConfig":
        """Lee ``CONSOLA_API_URL`` y ``CONSOLA_API_TIMEOUT`` del entorno."""

        env = os.environ if environ is None else environ
        base_url = env.get("CONSOLA_API_URL") or DEFAULT_API_URL
        timeout_text = env.get("CONSOLA_API_TIMEOUT")
        try:
            timeout = float(timeout_text) if timeout_text else DEFAULT_TIMEOUT
        except ValueError as exc:
            raise ValueError(
                f"CONSOLA_API_TIMEOUT no es un número válido: {timeout_text!r}"
            ) from exc
        return cls(base_url=base_url, timeout=timeout)

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"


__all__ = ["APIConfig", "DEFAULT_API_URL", "DEFAULT_TIMEOUT"]
