"""Punto de entrada de la aplicación.

Crea los componentes de infraestructura, servicios y estado, y arranca la
interfaz gráfica principal sobre un bucle asyncio integrado con Qt.
"""

from __future__ import annotations

import asyncio
import logging
import sys

from PyQt6.QtWidgets import QApplication
from qasync import QEventLoop

from gestor_usuarios.config import AppConfig
from gestor_usuarios.core.services import UserService
from gestor_usuarios.core.state import AppState
from gestor_usuarios.infrastructure.api_client import APIClient
from gestor_usuarios.infrastructure.repositories import UserRepository
from gestor_usuarios.ui.main_window import MainWindow


def main() -> None:
    """Arranca la aplicación PyQt6 con las dependencias configuradas."""

    config = AppConfig.desde_entorno()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info("Servicio de usuarios: %s", config.api_base)

    app = QApplication(sys.argv)
    loop = QEventLoop(app)
    asyncio.set_event_loop(loop)

    repository = UserRepository(APIClient(config))
    state = AppState()
    user_service = UserService(state, repository)

    window = MainWindow(state=state, user_service=user_service)
    window.show()

    with loop:
        loop.run_forever()


if __name__ == "__main__":  # pragma: no cover - punto de entrada interactivo
    main()
