"""Colección de usuarios, máquina de selección y canal de errores."""

import pytest

from gestor_usuarios.core.state import (
    AppState,
    CategoriaError,
    ErrorChannel,
    ModoCreacion,
    ModoEdicion,
    SelectionController,
    UserStore,
)
from gestor_usuarios.models.user import User, UserDraft


def usuario(id, nombre="Ada", apellido="", email="a@x.com", departamento=""):
    return User(id=id, nombre=nombre, apellido=apellido, email=email, departamento=departamento)


class TestUserStore:
    def test_reemplazar_todos_descarta_el_contenido_previo(self):
        store = UserStore([usuario(1), usuario(2)])

        store.reemplazar_todos([usuario(3)])

        assert [u.id for u in store] == [3]

    def test_reemplazar_todos_ignora_ids_repetidos(self):
        store = UserStore()

        store.reemplazar_todos([usuario(1, nombre="primero"), usuario(2), usuario(1, nombre="segundo")])

        assert [u.id for u in store] == [1, 2]
        assert store.obtener(1).nombre == "primero"

    def test_agregar_va_al_final_sin_ordenar(self):
        store = UserStore([usuario(5), usuario(2)])

        store.agregar(usuario(3))

        assert [u.id for u in store] == [5, 2, 3]

    def test_agregar_con_id_existente_no_duplica(self):
        store = UserStore([usuario(1), usuario(11, nombre="viejo")])

        store.agregar(usuario(11, nombre="nuevo"))

        assert [u.id for u in store] == [1, 11]
        assert store.obtener(11).nombre == "nuevo"

    def test_reemplazar_por_id_mantiene_la_posicion(self):
        store = UserStore([usuario(1), usuario(2), usuario(3)])

        assert store.reemplazar_por_id(2, usuario(2, email="nuevo@x.com"))

        assert [u.id for u in store] == [1, 2, 3]
        assert store.obtener(2).email == "nuevo@x.com"

    def test_reemplazar_por_id_conserva_el_id_original(self):
        store = UserStore([usuario(1)])

        store.reemplazar_por_id(1, usuario(99, email="eco@x.com"))

        assert [u.id for u in store] == [1]
        assert store.obtener(1).email == "eco@x.com"

    def test_reemplazar_por_id_inexistente_no_hace_nada(self):
        store = UserStore([usuario(1)])

        assert store.reemplazar_por_id(9, usuario(9)) is False
        assert store.usuarios == (usuario(1),)

    def test_eliminar_por_id_quita_exactamente_uno(self):
        store = UserStore([usuario(1), usuario(2), usuario(3)])

        assert store.eliminar_por_id(2)

        assert len(store) == 2
        assert 2 not in store
        assert [u.id for u in store] == [1, 3]

    def test_eliminar_por_id_inexistente(self):
        store = UserStore([usuario(1)])

        assert store.eliminar_por_id(7) is False
        assert len(store) == 1

    def test_ids_unicos_tras_cualquier_secuencia(self):
        store = UserStore()
        store.reemplazar_todos([usuario(1), usuario(2)])
        store.agregar(usuario(2))
        store.agregar(usuario(3))
        store.reemplazar_por_id(3, usuario(1))
        store.agregar(usuario(3))
        store.eliminar_por_id(1)
        store.agregar(usuario(1))

        ids = [u.id for u in store]
        assert len(ids) == len(set(ids))

    def test_filtrar_por_nombre_o_email(self):
        store = UserStore(
            [
                usuario(1, nombre="Ada", apellido="Lovelace", email="ada@x.com"),
                usuario(2, nombre="Grace", apellido="Hopper", email="grace@navy.mil"),
            ]
        )

        assert [u.id for u in store.filtrar("love")] == [1]
        assert [u.id for u in store.filtrar("NAVY")] == [2]
        assert [u.id for u in store.filtrar("  ")] == [1, 2]


class TestSelectionController:
    def test_estado_inicial_es_creacion_con_borrador_vacio(self):
        seleccion = SelectionController()

        assert seleccion.modo == ModoCreacion()
        assert not seleccion.editando
        assert seleccion.id_seleccionado is None
        assert seleccion.draft == UserDraft()

    def test_seleccionar_para_editar_copia_los_campos(self):
        seleccion = SelectionController()

        seleccion.seleccionar_para_editar(usuario(1, nombre="Ada", email="a@x.com", departamento="IT"))

        assert seleccion.modo == ModoEdicion(1)
        assert seleccion.id_seleccionado == 1
        assert seleccion.draft == UserDraft(nombre="Ada", apellido="", email="a@x.com", departamento="IT")

    def test_cambiar_de_seleccion_reemplaza_el_borrador(self):
        seleccion = SelectionController()
        seleccion.seleccionar_para_editar(usuario(1, nombre="Ada"))
        seleccion.actualizar_campo("apellido", "Lovelace")

        seleccion.seleccionar_para_editar(usuario(2, nombre="Grace"))

        assert seleccion.modo == ModoEdicion(2)
        assert seleccion.draft.nombre == "Grace"
        assert seleccion.draft.apellido == ""

    def test_cancelar_vuelve_a_creacion_y_vacia_el_borrador(self):
        seleccion = SelectionController()
        seleccion.seleccionar_para_editar(usuario(1))
        seleccion.actualizar_campo("email", "otro@x.com")

        seleccion.cancelar()

        assert seleccion.modo == ModoCreacion()
        assert seleccion.draft.esta_vacio()

    def test_actualizar_campo_en_modo_creacion(self):
        seleccion = SelectionController()

        seleccion.actualizar_campo("nombre", "Bob")

        assert seleccion.modo == ModoCreacion()
        assert seleccion.draft == UserDraft(nombre="Bob")

    def test_actualizar_campo_convierte_a_texto(self):
        seleccion = SelectionController()

        seleccion.actualizar_campo("departamento", None)
        seleccion.actualizar_campo("nombre", 42)

        assert seleccion.draft.departamento == ""
        assert seleccion.draft.nombre == "42"

    def test_campo_desconocido(self):
        with pytest.raises(ValueError):
            SelectionController().actualizar_campo("id", "3")

    def test_instantanea_es_independiente_del_borrador(self):
        seleccion = SelectionController()
        seleccion.actualizar_campo("nombre", "Bob")

        modo, draft = seleccion.instantanea()
        seleccion.actualizar_campo("nombre", "Robert")

        assert modo == ModoCreacion()
        assert draft.nombre == "Bob"


class TestErrorChannel:
    def test_vacio_al_inicio(self):
        canal = ErrorChannel()

        assert canal.mensaje is None
        assert canal.categoria is None

    def test_reportar_sobrescribe_el_ultimo_error(self):
        canal = ErrorChannel()

        canal.reportar(CategoriaError.CREAR)
        canal.reportar(CategoriaError.ELIMINAR)

        assert canal.categoria is CategoriaError.ELIMINAR
        assert canal.mensaje == CategoriaError.ELIMINAR.mensaje

    def test_limpiar(self):
        canal = ErrorChannel()
        canal.reportar(CategoriaError.LISTAR)

        canal.limpiar()

        assert canal.mensaje is None

    def test_cuatro_categorias_con_mensajes_distintos(self):
        mensajes = {categoria.mensaje for categoria in CategoriaError}

        assert len(CategoriaError) == 4
        assert len(mensajes) == 4


def test_app_state_crea_componentes_independientes():
    uno, otro = AppState(), AppState()

    uno.usuarios.agregar(usuario(1))

    assert len(otro.usuarios) == 0
    assert uno.seleccion is not otro.seleccion
