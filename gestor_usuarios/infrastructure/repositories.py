"""Implementaciones de repositorios para acceso a datos."""

from __future__ import annotations

from typing import Any

from gestor_usuarios.infrastructure.api_client import APIClient, APIError
from gestor_usuarios.models.user import User, UserDraft, UserId


class UserRepository:
    """Repositorio de usuarios basado en un cliente API.

    Convierte entre la representación remota (``firstName``, ``lastName``,
    ``name``, ``department``) y los modelos locales ``User``/``UserDraft``.
    """

    def __init__(self, api_client: APIClient) -> None:
        self._api_client = api_client

    async def listar_todos(self) -> list[User]:
        """Devuelve la lista completa de usuarios."""

        usuarios_crudos = await self._api_client.listar_usuarios()
        return [self._a_usuario(datos, "GET") for datos in usuarios_crudos]

    async def crear(self, draft: UserDraft) -> User:
        """Crea el usuario; el servidor asigna el identificador."""

        datos = await self._api_client.crear_usuario(self._a_payload(draft))
        return self._a_usuario(datos, "POST")

    async def actualizar(self, usuario_id: UserId, draft: UserDraft) -> User:
        """Reemplaza el usuario ``usuario_id`` y devuelve su nueva versión."""

        datos = await self._api_client.actualizar_usuario(usuario_id, self._a_payload(draft))
        if datos.get("id") is None:
            datos = {**datos, "id": usuario_id}
        return self._a_usuario(datos, "PUT")

    async def eliminar(self, usuario_id: UserId) -> None:
        await self._api_client.eliminar_usuario(usuario_id)

    # ------------------------------------------------------------------
    # Conversión
    # ------------------------------------------------------------------
    @staticmethod
    def _a_payload(draft: UserDraft) -> dict:
        nombre = draft.nombre.strip()
        apellido = draft.apellido.strip()
        return {
            "firstName": nombre,
            "lastName": apellido,
            "name": f"{nombre} {apellido}".strip(),
            "email": draft.email.strip(),
            "department": draft.departamento.strip(),
        }

    @staticmethod
    def _a_usuario(datos: Any, metodo: str) -> User:
        if not isinstance(datos, dict) or datos.get("id") is None:
            raise APIError(metodo, APIClient.RECURSO, f"usuario sin identificador: {datos!r}")
        if isinstance(datos["id"], bool) or not isinstance(datos["id"], (int, str)):
            raise APIError(metodo, APIClient.RECURSO, f"identificador inválido: {datos['id']!r}")

        nombre = datos.get("firstName")
        apellido = datos.get("lastName")
        if nombre is None and apellido is None:
            partes = str(datos.get("name") or "").split(None, 1)
            nombre = partes[0] if partes else ""
            apellido = partes[1] if len(partes) > 1 else ""

        return User(
            id=datos["id"],
            nombre=_texto(nombre),
            apellido=_texto(apellido),
            email=_texto(datos.get("email")),
            departamento=_texto(datos.get("department")),
        )


def _texto(valor: Any) -> str:
    return "" if valor is None else str(valor).strip()


__all__ = ["UserRepository"]
