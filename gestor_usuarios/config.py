"""Configuración de la aplicación leída desde variables de entorno."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

API_BASE_POR_DEFECTO = "https://jsonplaceholder.typicode.com"
TIMEOUT_POR_DEFECTO = 10.0
NIVELES_LOG = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Parámetros de conexión y de registro."""

    api_base: str = API_BASE_POR_DEFECTO
    timeout: float = TIMEOUT_POR_DEFECTO
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        object.__setattr__(self, "api_base", self.api_base.rstrip("/"))
        if self.timeout <= 0:
            raise ValueError(f"El timeout debe ser positivo: {self.timeout}")
        object.__setattr__(self, "log_level", self.log_level.upper())
        if self.log_level not in NIVELES_LOG:
            raise ValueError(f"Nivel de log desconocido: {self.log_level!r}")

    @classmethod
    def desde_entorno(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """Construye la configuración a partir de ``GESTOR_USUARIOS_*``."""

        env = os.environ if environ is None else environ
        timeout_texto = env.get("GESTOR_USUARIOS_TIMEOUT", str(TIMEOUT_POR_DEFECTO))
        try:
            timeout = float(timeout_texto)
        except ValueError as exc:
            raise ValueError(f"GESTOR_USUARIOS_TIMEOUT inválido: {timeout_texto!r}") from exc

        return cls(
            api_base=env.get("GESTOR_USUARIOS_API_BASE", API_BASE_POR_DEFECTO),
            timeout=timeout,
            log_level=env.get("GESTOR_USUARIOS_LOG_LEVEL", "INFO").upper(),
        )


__all__ = ["API_BASE_POR_DEFECTO", "AppConfig", "NIVELES_LOG", "TIMEOUT_POR_DEFECTO"]
