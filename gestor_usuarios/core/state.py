"""Estado de la aplicación.

Reúne la colección de usuarios, la selección con su borrador y el último
mensaje de error. No realiza operaciones de red: las mutaciones son
síncronas y deterministas.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Union

from gestor_usuarios.models.user import CAMPOS_DRAFT, User, UserDraft, UserId

logger = logging.getLogger(__name__)


class UserStore:
    """Colección ordenada de usuarios sin identificadores repetidos.

    El orden es el de inserción: el listado inicial tal como llega del
    servidor y luego los usuarios creados al final.
    """

    def __init__(self, usuarios: Iterable[User] = ()) -> None:
        self._usuarios: List[User] = []
        self.reemplazar_todos(usuarios)

    @property
    def usuarios(self) -> tuple[User, ...]:
        return tuple(self._usuarios)

    def __len__(self) -> int:
        return len(self._usuarios)

    def __iter__(self) -> Iterator[User]:
        return iter(tuple(self._usuarios))

    def __contains__(self, usuario_id: object) -> bool:
        return self._indice(usuario_id) is not None

    def obtener(self, usuario_id: UserId) -> Optional[User]:
        indice = self._indice(usuario_id)
        return None if indice is None else self._usuarios[indice]

    def reemplazar_todos(self, usuarios: Iterable[User]) -> None:
        """Descarta el contenido previo y carga ``usuarios``."""

        nuevos: List[User] = []
        vistos: set = set()
        for usuario in usuarios:
            if usuario.id in vistos:
                logger.warning("Usuario %r repetido en el listado; se conserva el primero", usuario.id)
                continue
            vistos.add(usuario.id)
            nuevos.append(usuario)
        self._usuarios = nuevos

    def agregar(self, usuario: User) -> None:
        """Añade ``usuario`` al final; si su id ya existe lo reemplaza en su sitio."""

        indice = self._indice(usuario.id)
        if indice is not None:
            logger.warning("El servidor devolvió un id ya existente (%r); se reemplaza", usuario.id)
            self._usuarios[indice] = usuario
            return
        self._usuarios.append(usuario)

    def reemplazar_por_id(self, usuario_id: UserId, usuario: User) -> bool:
        indice = self._indice(usuario_id)
        if indice is None:
            logger.warning("No se encontró el usuario %r para reemplazarlo", usuario_id)
            return False
        if usuario.id != usuario_id:
            usuario = replace(usuario, id=usuario_id)
        self._usuarios[indice] = usuario
        return True

    def eliminar_por_id(self, usuario_id: UserId) -> bool:
        indice = self._indice(usuario_id)
        if indice is None:
            return False
        del self._usuarios[indice]
        return True

    def filtrar(self, consulta: str) -> list[User]:
        """Filtra usuarios por nombre completo o correo."""

        consulta_normalizada = consulta.strip().lower()
        if not consulta_normalizada:
            return list(self._usuarios)

        return [
            usuario
            for usuario in self._usuarios
            if consulta_normalizada in usuario.nombre_completo.lower()
            or consulta_normalizada in usuario.email.lower()
        ]

    def _indice(self, usuario_id: object) -> Optional[int]:
        for indice, usuario in enumerate(self._usuarios):
            if usuario.id == usuario_id:
                return indice
        return None


@dataclass(frozen=True, slots=True)
class ModoCreacion:
    """Sin selección: el formulario crea un usuario nuevo."""


@dataclass(frozen=True, slots=True)
class ModoEdicion:
    """Se está editando el usuario ``usuario_id``."""

    usuario_id: UserId


Modo = Union[ModoCreacion, ModoEdicion]


class SelectionController:
    """Máquina de estados Creación/Edición con el borrador del formulario."""

    def __init__(self) -> None:
        self._modo: Modo = ModoCreacion()
        self._draft = UserDraft.vacio()

    @property
    def modo(self) -> Modo:
        return self._modo

    @property
    def draft(self) -> UserDraft:
        return self._draft

    @property
    def editando(self) -> bool:
        return isinstance(self._modo, ModoEdicion)

    @property
    def id_seleccionado(self) -> Optional[UserId]:
        if isinstance(self._modo, ModoEdicion):
            return self._modo.usuario_id
        return None

    def seleccionar_para_editar(self, usuario: User) -> None:
        self._modo = ModoEdicion(usuario.id)
        self._draft = UserDraft.desde_usuario(usuario)

    def cancelar(self) -> None:
        """Vuelve a modo creación con el borrador vacío."""

        self._modo = ModoCreacion()
        self._draft = UserDraft.vacio()

    def actualizar_campo(self, nombre: str, valor: object) -> None:
        if nombre not in CAMPOS_DRAFT:
            raise ValueError(f"Campo desconocido en el formulario: {nombre!r}")
        setattr(self._draft, nombre, valor)

    def instantanea(self) -> tuple[Modo, UserDraft]:
        return self._modo, self._draft.copia()


class CategoriaError(Enum):
    """Categorías de fallo visibles para el operador."""

    LISTAR = "No se pudieron cargar los usuarios. Intente nuevamente más tarde."
    CREAR = "No se pudo agregar el usuario. Intente nuevamente."
    ACTUALIZAR = "No se pudo editar el usuario. Intente nuevamente."
    ELIMINAR = "No se pudo eliminar el usuario. Intente nuevamente."

    @property
    def mensaje(self) -> str:
        return self.value


class ErrorChannel:
    """Guarda únicamente el último error reportado."""

    def __init__(self) -> None:
        self._categoria: Optional[CategoriaError] = None

    @property
    def categoria(self) -> Optional[CategoriaError]:
        return self._categoria

    @property
    def mensaje(self) -> Optional[str]:
        return None if self._categoria is None else self._categoria.mensaje

    def reportar(self, categoria: CategoriaError) -> None:
        self._categoria = categoria

    def limpiar(self) -> None:
        self._categoria = None


@dataclass
class AppState:
    """Agrupa el estado compartido que la vista lee y los servicios modifican."""

    usuarios: UserStore = field(default_factory=UserStore)
    seleccion: SelectionController = field(default_factory=SelectionController)
    errores: ErrorChannel = field(default_factory=ErrorChannel)


__all__ = [
    "AppState",
    "CategoriaError",
    "ErrorChannel",
    "Modo",
    "ModoCreacion",
    "ModoEdicion",
    "SelectionController",
    "UserStore",
]
