"""Cliente HTTP del recurso ``/users``.

Las peticiones se hacen con ``urllib`` y se ejecutan en un hilo auxiliar
mediante ``asyncio.to_thread`` para no bloquear el bucle de eventos de
la interfaz. Cualquier problema de transporte, estado HTTP distinto de
2xx o cuerpo inválido se informa con una única excepción, ``APIError``.
"""

from __future__ import annotations

import asyncio
import http.client
import json
import logging
from typing import Any, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from gestor_usuarios.config import AppConfig
from gestor_usuarios.models.user import UserId

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Fallo de una operación remota, sin distinguir su causa."""

    def __init__(self, metodo: str, ruta: str, detalle: str, estado: Optional[int] = None) -> None:
        super().__init__(f"{metodo} {ruta} falló: {detalle}")
        self.metodo = metodo
        self.ruta = ruta
        self.detalle = detalle
        self.estado = estado


class APIClient:
    """Traduce las operaciones sobre usuarios a peticiones HTTP."""

    RECURSO = "/users"

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or AppConfig()

    async def listar_usuarios(self) -> list[dict]:
        payload = await self._ejecutar("GET", self.RECURSO)
        if not isinstance(payload, list):
            raise APIError("GET", self.RECURSO, "se esperaba una lista de usuarios")
        return payload

    async def crear_usuario(self, datos: dict) -> dict:
        return self._como_objeto("POST", self.RECURSO, await self._ejecutar("POST", self.RECURSO, datos))

    async def actualizar_usuario(self, usuario_id: UserId, datos: dict) -> dict:
        ruta = self._ruta_usuario(usuario_id)
        return self._como_objeto("PUT", ruta, await self._ejecutar("PUT", ruta, datos))

    async def eliminar_usuario(self, usuario_id: UserId) -> None:
        await self._ejecutar("DELETE", self._ruta_usuario(usuario_id))

    # ------------------------------------------------------------------
    # Transporte
    # ------------------------------------------------------------------
    async def _ejecutar(self, metodo: str, ruta: str, datos: dict | None = None) -> Any:
        return await asyncio.to_thread(self._solicitar, metodo, ruta, datos)

    def _solicitar(self, metodo: str, ruta: str, datos: dict | None = None) -> Any:
        """Realiza la petición de forma bloqueante y decodifica el JSON."""

        url = f"{self.config.api_base}{ruta}"
        headers = {"Accept": "application/json"}
        cuerpo = None
        if datos is not None:
            cuerpo = json.dumps(datos).encode("utf-8")
            headers["Content-Type"] = "application/json; charset=utf-8"

        logger.debug("%s %s", metodo, url)
        request = Request(url, data=cuerpo, method=metodo, headers=headers)
        try:
            with urlopen(request, timeout=self.config.timeout) as response:
                raw = response.read()
        except HTTPError as exc:
            logger.warning("%s %s respondió HTTP %s", metodo, ruta, exc.code)
            raise APIError(metodo, ruta, f"HTTP {exc.code}", estado=exc.code) from exc
        except URLError as exc:
            logger.warning("%s %s sin conexión: %s", metodo, ruta, exc.reason)
            raise APIError(metodo, ruta, f"sin conexión ({exc.reason})") from exc
        except OSError as exc:
            logger.warning("%s %s interrumpido: %s", metodo, ruta, exc)
            raise APIError(metodo, ruta, str(exc) or type(exc).__name__) from exc
        except http.client.HTTPException as exc:
            logger.warning("%s %s respuesta HTTP malformada: %r", metodo, ruta, exc)
            raise APIError(metodo, ruta, f"respuesta malformada ({type(exc).__name__})") from exc

        if not raw or not raw.strip():
            return {}
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning("%s %s devolvió un cuerpo no JSON", metodo, ruta)
            raise APIError(metodo, ruta, "respuesta no es JSON válido") from exc

    def _ruta_usuario(self, usuario_id: UserId) -> str:
        return f"{self.RECURSO}/{quote(str(usuario_id), safe='')}"

    @staticmethod
    def _como_objeto(metodo: str, ruta: str, payload: Any) -> dict:
        if not isinstance(payload, dict):
            raise APIError(metodo, ruta, "se esperaba un objeto de usuario")
        return payload


__all__ = ["APIClient", "APIError"]
