"""Servicios de aplicación que coordinan el estado local con el servidor.

Cada intención del operador (cargar, enviar el formulario, eliminar) se
traduce en una llamada al repositorio. Los fallos remotos se capturan
aquí y se convierten en un mensaje del ``ErrorChannel``; nunca se
propagan a la vista.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Hashable, Set, Tuple

from gestor_usuarios.core.state import AppState, CategoriaError, ModoEdicion
from gestor_usuarios.infrastructure.api_client import APIError
from gestor_usuarios.infrastructure.repositories import UserRepository
from gestor_usuarios.models.user import UserId

logger = logging.getLogger(__name__)

ClaveOperacion = Tuple[Hashable, ...]


class Resultado(Enum):
    EXITO = "exito"
    FALLO = "fallo"
    RECHAZADO = "rechazado"


class UserService:
    """Orquesta el flujo de datos relacionado con usuarios.

    Mantiene un registro de operaciones en curso por clave: una segunda
    intención con la misma clave se rechaza mientras la primera no haya
    terminado. Operaciones con claves distintas pueden solaparse y cada
    respuesta se aplica a su propia fila al completarse.
    """

    def __init__(self, state: AppState, repository: UserRepository) -> None:
        self.state = state
        self._repository = repository
        self._en_curso: Set[ClaveOperacion] = set()

    # ------------------------------------------------------------------
    # Operaciones en curso
    # ------------------------------------------------------------------
    def en_curso(self, *clave: Hashable) -> bool:
        """Indica si hay una operación pendiente para ``clave``.

        Sin argumentos informa si hay cualquier operación pendiente; con
        un único elemento (``"actualizar"``) si hay alguna de esa clase.
        """

        if not clave:
            return bool(self._en_curso)
        if len(clave) == 1:
            return any(pendiente[0] == clave[0] for pendiente in self._en_curso)
        return tuple(clave) in self._en_curso

    def _reservar(self, clave: ClaveOperacion) -> bool:
        if clave in self._en_curso:
            logger.info("Operación %s ya en curso; se ignora la nueva solicitud", clave)
            return False
        self._en_curso.add(clave)
        return True

    def _liberar(self, clave: ClaveOperacion) -> None:
        self._en_curso.discard(clave)

    # ------------------------------------------------------------------
    # Intenciones
    # ------------------------------------------------------------------
    async def cargar_usuarios(self) -> Resultado:
        """Recupera el listado completo y reemplaza la colección local."""

        clave = ("listar",)
        if not self._reservar(clave):
            return Resultado.RECHAZADO
        try:
            usuarios = await self._repository.listar_todos()
        except APIError as exc:
            logger.warning("No se pudo cargar el listado: %s", exc)
            self.state.errores.reportar(CategoriaError.LISTAR)
            return Resultado.FALLO
        finally:
            self._liberar(clave)

        self.state.usuarios.reemplazar_todos(usuarios)
        self.state.errores.limpiar()
        logger.info("Usuarios cargados: %d", len(self.state.usuarios))
        return Resultado.EXITO

    def seleccionar(self, usuario_id: UserId) -> bool:
        usuario = self.state.usuarios.obtener(usuario_id)
        if usuario is None:
            logger.warning("No existe el usuario %r para editar", usuario_id)
            return False
        self.state.seleccion.seleccionar_para_editar(usuario)
        return True

    def cancelar(self) -> None:
        self.state.seleccion.cancelar()

    async def enviar_formulario(self) -> Resultado:
        """Crea o actualiza según el modo actual de la selección."""

        seleccion = self.state.seleccion
        modo, draft = seleccion.instantanea()
        if isinstance(modo, ModoEdicion):
            clave: ClaveOperacion = ("actualizar", modo.usuario_id)
            categoria = CategoriaError.ACTUALIZAR
        else:
            clave = ("crear",)
            categoria = CategoriaError.CREAR

        if not self._reservar(clave):
            return Resultado.RECHAZADO
        try:
            if isinstance(modo, ModoEdicion):
                usuario = await self._repository.actualizar(modo.usuario_id, draft)
            else:
                usuario = await self._repository.crear(draft)
        except APIError as exc:
            logger.warning("No se pudo guardar el usuario: %s", exc)
            self.state.errores.reportar(categoria)
            return Resultado.FALLO
        finally:
            self._liberar(clave)

        if isinstance(modo, ModoEdicion):
            self.state.usuarios.reemplazar_por_id(modo.usuario_id, usuario)
        else:
            self.state.usuarios.agregar(usuario)

        # El operador pudo haber cambiado de fila o seguido escribiendo mientras se esperaba.
        if seleccion.instantanea() == (modo, draft):
            seleccion.cancelar()
        self.state.errores.limpiar()
        return Resultado.EXITO

    async def eliminar_usuario(self, usuario_id: UserId) -> Resultado:
        clave = ("eliminar", usuario_id)
        if not self._reservar(clave):
            return Resultado.RECHAZADO
        try:
            await self._repository.eliminar(usuario_id)
        except APIError as exc:
            logger.warning("No se pudo eliminar el usuario %r: %s", usuario_id, exc)
            self.state.errores.reportar(CategoriaError.ELIMINAR)
            return Resultado.FALLO
        finally:
            self._liberar(clave)

        self.state.usuarios.eliminar_por_id(usuario_id)
        if self.state.seleccion.modo == ModoEdicion(usuario_id):
            self.state.seleccion.cancelar()
        self.state.errores.limpiar()
        return Resultado.EXITO


__all__ = ["Resultado", "UserService"]
