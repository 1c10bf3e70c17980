"""Ventana principal de la aplicación."""

from __future__ import annotations

from dataclasses import dataclass

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)
from qasync import asyncSlot

from gestor_usuarios.core.services import Resultado, UserService
from gestor_usuarios.core.state import AppState
from gestor_usuarios.models.user import CAMPOS_DRAFT, User

_ETIQUETAS_CAMPOS = {
    "nombre": "Nombre",
    "apellido": "Apellido",
    "email": "Email",
    "departamento": "Departamento",
}


@dataclass(slots=True)
class _TableColumns:
    id: int = 0
    nombre: int = 1
    email: int = 2
    departamento: int = 3


class MainWindow(QMainWindow):  # pragma: no cover - UI
    """Ventana principal con listado de usuarios y formulario de edición."""

    def __init__(self, *, state: AppState, user_service: UserService) -> None:
        super().__init__()
        self.state = state
        self.user_service = user_service
        self._columns = _TableColumns()

        self.setWindowTitle("Gestión de usuarios")
        self.resize(820, 560)

        self.search_box = QLineEdit(placeholderText="Buscar por nombre o email")
        self.search_box.textChanged.connect(self._refrescar_tabla)

        self.refresh_button = QPushButton("Recargar")
        self.refresh_button.clicked.connect(self._reload_data)

        self.table = QTableWidget(columnCount=4)
        self.table.setHorizontalHeaderLabels(["ID", "Nombre", "Email", "Departamento"])
        self.table.horizontalHeader().setStretchLastSection(True)
        self.table.verticalHeader().setVisible(False)
        self.table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        self.table.setSelectionMode(QTableWidget.SelectionMode.SingleSelection)
        self.table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        self.table.itemDoubleClicked.connect(lambda _item: self._on_edit())

        self.edit_button = QPushButton("Editar")
        self.edit_button.clicked.connect(self._on_edit)
        self.delete_button = QPushButton("Eliminar")
        self.delete_button.clicked.connect(self._on_delete)
        self.new_button = QPushButton("Nuevo usuario")
        self.new_button.clicked.connect(self._on_cancel)

        self.error_label = QLabel("")
        self.error_label.setStyleSheet("color: #b91c1c; font-weight: 600;")
        self.error_label.setVisible(False)

        self.inputs: dict[str, QLineEdit] = {}
        for campo in CAMPOS_DRAFT:
            line_edit = QLineEdit(placeholderText=_ETIQUETAS_CAMPOS[campo])
            line_edit.textEdited.connect(
                lambda texto, campo=campo: self.state.seleccion.actualizar_campo(campo, texto)
            )
            self.inputs[campo] = line_edit

        self.submit_button = QPushButton()
        self.submit_button.clicked.connect(self._on_submit)
        self.cancel_button = QPushButton("Cancelar")
        self.cancel_button.clicked.connect(self._on_cancel)

        self._build_ui()
        self._render()
        self._reload_data()

    def _build_ui(self) -> None:
        top_bar = QHBoxLayout()
        top_bar.addWidget(QLabel("Usuarios"))
        top_bar.addStretch(1)
        top_bar.addWidget(self.search_box)
        top_bar.addWidget(self.refresh_button)

        row_actions = QHBoxLayout()
        row_actions.addWidget(self.edit_button)
        row_actions.addWidget(self.delete_button)
        row_actions.addStretch(1)
        row_actions.addWidget(self.new_button)

        form = QFormLayout()
        for campo, line_edit in self.inputs.items():
            form.addRow(_ETIQUETAS_CAMPOS[campo], line_edit)
        form_buttons = QHBoxLayout()
        form_buttons.addStretch(1)
        form_buttons.addWidget(self.cancel_button)
        form_buttons.addWidget(self.submit_button)
        form.addRow(form_buttons)

        self.form_box = QGroupBox()
        self.form_box.setLayout(form)

        layout = QVBoxLayout()
        layout.addLayout(top_bar)
        layout.addWidget(self.error_label)
        layout.addWidget(self.table)
        layout.addLayout(row_actions)
        layout.addWidget(self.form_box)

        container = QWidget()
        container.setLayout(layout)
        self.setCentralWidget(container)

    # ------------------------------------------------------------------
    # Eventos y acciones
    # ------------------------------------------------------------------
    @asyncSlot()
    async def _reload_data(self) -> None:
        """Recarga los usuarios desde el servicio y refresca la tabla."""

        self.refresh_button.setEnabled(False)
        await self.user_service.cargar_usuarios()
        self._render()

    def _on_edit(self) -> None:
        usuario = self._usuario_actual()
        if usuario is None:
            return
        self.user_service.seleccionar(usuario.id)
        self._render()

    def _on_cancel(self) -> None:
        self.user_service.cancelar()
        self._render()

    @asyncSlot()
    async def _on_submit(self) -> None:
        draft = self.state.seleccion.draft
        faltantes = draft.campos_faltantes()
        if faltantes:
            nombres = ", ".join(_ETIQUETAS_CAMPOS[campo] for campo in faltantes)
            QMessageBox.warning(self, "Formulario incompleto", f"Complete los campos: {nombres}.")
            return
        if not draft.email_valido():
            QMessageBox.warning(self, "Formulario incompleto", "Ingrese un email válido.")
            return

        self.submit_button.setEnabled(False)
        resultado = await self.user_service.enviar_formulario()
        if resultado is Resultado.EXITO:
            self.statusBar().showMessage("Usuario guardado", 4000)
        self._render()

    @asyncSlot()
    async def _on_delete(self) -> None:
        usuario = self._usuario_actual()
        if usuario is None:
            return
        respuesta = QMessageBox.question(
            self, "Eliminar usuario", f"¿Eliminar a {usuario.nombre_completo or usuario.email}?"
        )
        if respuesta != QMessageBox.StandardButton.Yes:
            return

        self.delete_button.setEnabled(False)
        resultado = await self.user_service.eliminar_usuario(usuario.id)
        if resultado is Resultado.EXITO:
            self.statusBar().showMessage("Usuario eliminado", 4000)
        self._render()

    def _usuario_actual(self) -> User | None:
        current_row = self.table.currentRow()
        if current_row < 0:
            return None
        item = self.table.item(current_row, self._columns.id)
        if item is None:
            return None
        return self.state.usuarios.obtener(item.data(Qt.ItemDataRole.UserRole))

    # ------------------------------------------------------------------
    # Renderizado
    # ------------------------------------------------------------------
    def _render(self) -> None:
        self._refrescar_tabla()
        self._refrescar_formulario()

        mensaje = self.state.errores.mensaje
        self.error_label.setText(mensaje or "")
        self.error_label.setVisible(bool(mensaje))

        self.refresh_button.setEnabled(not self.user_service.en_curso("listar"))
        self.delete_button.setEnabled(not self.user_service.en_curso("eliminar"))

    def _refrescar_tabla(self) -> None:
        usuarios = self.state.usuarios.filtrar(self.search_box.text())
        self.table.setRowCount(len(usuarios))

        for row, usuario in enumerate(usuarios):
            valores = {
                self._columns.id: str(usuario.id),
                self._columns.nombre: usuario.nombre_completo,
                self._columns.email: usuario.email,
                self._columns.departamento: usuario.departamento or "N/A",
            }
            for column, texto in valores.items():
                item = QTableWidgetItem(texto)
                item.setFlags(item.flags() & ~Qt.ItemFlag.ItemIsEditable)
                item.setData(Qt.ItemDataRole.UserRole, usuario.id)
                self.table.setItem(row, column, item)

        self.table.resizeColumnsToContents()

    def _refrescar_formulario(self) -> None:
        seleccion = self.state.seleccion
        self.form_box.setTitle("Editar usuario" if seleccion.editando else "Agregar usuario")
        self.submit_button.setText("Actualizar usuario" if seleccion.editando else "Agregar usuario")

        if seleccion.editando:
            pendiente = self.user_service.en_curso("actualizar", seleccion.id_seleccionado)
        else:
            pendiente = self.user_service.en_curso("crear")
        self.submit_button.setEnabled(not pendiente)

        for campo, line_edit in self.inputs.items():
            valor = getattr(seleccion.draft, campo)
            if line_edit.text() != valor:
                line_edit.setText(valor)


__all__ = ["MainWindow"]
