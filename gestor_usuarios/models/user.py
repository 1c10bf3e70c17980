"""Definiciones de modelos de dominio."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

UserId = Union[int, str]

CAMPOS_DRAFT = ("nombre", "apellido", "email", "departamento")
CAMPOS_OBLIGATORIOS = ("nombre", "apellido", "email")


@dataclass(frozen=True, slots=True)
class User:
    """Usuario tal como lo devuelve el servicio remoto.

    El ``id`` lo asigna el servidor al crear el registro y nunca se
    modifica localmente.
    """

    id: UserId
    nombre: str
    apellido: str
    email: str
    departamento: str = ""

    @property
    def nombre_completo(self) -> str:
        return f"{self.nombre} {self.apellido}".strip()


@dataclass(slots=True)
class UserDraft:
    """Borrador editable asociado al formulario.

    Todos los campos son cadenas: un valor ausente se guarda como ``""``
    para que los controles del formulario siempre tengan texto.
    """

    nombre: str = ""
    apellido: str = ""
    email: str = ""
    departamento: str = ""

    def __setattr__(self, name: str, value: object) -> None:
        if name in CAMPOS_DRAFT:
            value = _como_texto(value)
        object.__setattr__(self, name, value)

    @classmethod
    def vacio(cls) -> "UserDraft":
        return cls()

    @classmethod
    def desde_usuario(cls, usuario: User) -> "UserDraft":
        """Crea un borrador con los datos editables de ``usuario``."""

        return cls(
            nombre=usuario.nombre,
            apellido=usuario.apellido,
            email=usuario.email,
            departamento=usuario.departamento,
        )

    def copia(self) -> "UserDraft":
        return UserDraft(self.nombre, self.apellido, self.email, self.departamento)

    def esta_vacio(self) -> bool:
        return all(not getattr(self, campo) for campo in CAMPOS_DRAFT)

    def campos_faltantes(self) -> list[str]:
        """Devuelve los campos obligatorios que están en blanco."""

        return [campo for campo in CAMPOS_OBLIGATORIOS if not getattr(self, campo).strip()]

    def email_valido(self) -> bool:
        local, separador, dominio = self.email.strip().partition("@")
        if not separador or not local or " " in local:
            return False
        return "." in dominio and not dominio.startswith(".") and not dominio.endswith(".")


def _como_texto(valor: object) -> str:
    if valor is None:
        return ""
    return valor if isinstance(valor, str) else str(valor)


__all__ = ["CAMPOS_DRAFT", "CAMPOS_OBLIGATORIOS", "User", "UserDraft", "UserId"]
