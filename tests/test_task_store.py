"""Tests for the SQLAlchemy-backed task store."""

import warnings

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import inspect

from tarefas.core.errors import StoreErrorKind, TaskStoreError
from tarefas.db.init_db import EXAMPLE_TITLE, create_tables, init_db, seed_example_task
from tarefas.db.models import Task
from tarefas.db.session import create_db_engine, create_session_factory
from tarefas.db.task_store import SqlTaskStore, parse_task_id, validate_task_data
from tarefas.main import create_app

from .conftest import make_settings


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://")
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def task_store(engine) -> SqlTaskStore:
    return SqlTaskStore(create_session_factory(engine))


async def _kind_of(coro) -> StoreErrorKind:
    with pytest.raises(TaskStoreError) as exc_info:
        await coro
    return exc_info.value.kind


class TestParseTaskId:

    @pytest.mark.parametrize("raw,expected", [("1", 1), (" 42 ", 42), (7, 7)])
    def test_valid(self, raw, expected):
        assert parse_task_id(raw) == expected

    @pytest.mark.parametrize("raw", ["abc", "0", "-1", "1.5", "", None, True, 0])
    def test_invalid(self, raw):
        with pytest.raises(TaskStoreError) as exc_info:
            parse_task_id(raw)

        assert exc_info.value.kind is StoreErrorKind.VALIDATION
        assert exc_info.value.message == "id da tarefa inválido"


class TestValidateTaskData:

    def test_create_requires_title(self):
        with pytest.raises(TaskStoreError, match="título obrigatório"):
            validate_task_data({}, partial=False)

    @pytest.mark.parametrize("titulo", ["", "   ", None, 5])
    def test_blank_or_non_string_title(self, titulo):
        with pytest.raises(TaskStoreError, match="título obrigatório"):
            validate_task_data({"titulo": titulo}, partial=True)

    def test_title_too_long(self):
        with pytest.raises(TaskStoreError, match="título muito longo"):
            validate_task_data({"titulo": "a" * 201}, partial=False)

    def test_title_is_stripped(self):
        assert validate_task_data({"titulo": "  Ler  "}, partial=False) == {"titulo": "Ler"}

    @pytest.mark.parametrize("payload", [None, [], "texto", 3])
    def test_not_an_object(self, payload):
        with pytest.raises(TaskStoreError, match="dados da tarefa inválidos"):
            validate_task_data(payload, partial=False)

    def test_unknown_field(self):
        with pytest.raises(TaskStoreError, match="campo desconhecido: prioridade"):
            validate_task_data({"titulo": "x", "prioridade": 1}, partial=False)

    def test_id_is_not_editable(self):
        with pytest.raises(TaskStoreError, match="campo desconhecido: id"):
            validate_task_data({"id": 3}, partial=True)

    @pytest.mark.parametrize("completa", ["true", 1, None])
    def test_completa_must_be_boolean(self, completa):
        with pytest.raises(TaskStoreError, match="completa deve ser verdadeiro ou falso"):
            validate_task_data({"completa": completa}, partial=True)

    def test_descricao_type(self):
        with pytest.raises(TaskStoreError, match="descrição inválida"):
            validate_task_data({"titulo": "x", "descricao": 10}, partial=False)

    def test_empty_update(self):
        with pytest.raises(TaskStoreError, match="nenhum campo para atualizar"):
            validate_task_data({}, partial=True)

    def test_partial_update(self):
        assert validate_task_data({"completa": True}, partial=True) == {"completa": True}


class TestSqlTaskStore:

    @pytest.mark.asyncio
    async def test_create_and_get(self, task_store):
        created = await task_store.create_task({"titulo": "Estudar", "descricao": "cap. 3"})

        assert created["id"] == 1
        assert created["titulo"] == "Estudar"
        assert created["descricao"] == "cap. 3"
        assert created["completa"] is False
        assert isinstance(created["criada_em"], str)
        assert await task_store.get_task("1") == created

    def test_timestamps_use_timezone_aware_clock(self, task_store):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            created = task_store._create_task({"titulo": "Estudar"})
            updated = task_store._update_task(created["id"], {"completa": True})

        assert not [w for w in caught if "utcnow" in str(w.message)]
        assert updated["atualizada_em"] >= created["criada_em"]

    @pytest.mark.asyncio
    async def test_list_is_ordered_by_id(self, task_store):
        for titulo in ("a", "b", "c"):
            await task_store.create_task({"titulo": titulo})

        tasks = await task_store.list_tasks()

        assert [task["titulo"] for task in tasks] == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_list_empty(self, task_store):
        assert await task_store.list_tasks() == []

    @pytest.mark.asyncio
    async def test_create_validation(self, task_store):
        assert await _kind_of(task_store.create_task({"titulo": ""})) is StoreErrorKind.VALIDATION
        assert await task_store.list_tasks() == []

    @pytest.mark.asyncio
    async def test_update(self, task_store):
        await task_store.create_task({"titulo": "Estudar"})

        updated = await task_store.update_task("1", {"completa": True})

        assert updated["completa"] is True
        assert updated["titulo"] == "Estudar"
        assert (await task_store.get_task(1))["completa"] is True

    @pytest.mark.asyncio
    async def test_update_missing(self, task_store):
        kind = await _kind_of(task_store.update_task("9", {"completa": True}))

        assert kind is StoreErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_update_invalid_id(self, task_store):
        kind = await _kind_of(task_store.update_task("abc", {"completa": True}))

        assert kind is StoreErrorKind.VALIDATION

    @pytest.mark.asyncio
    async def test_get_missing(self, task_store):
        assert await _kind_of(task_store.get_task("999")) is StoreErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_delete_returns_previous_state(self, task_store):
        created = await task_store.create_task({"titulo": "Apagar"})

        deleted = await task_store.delete_task(str(created["id"]))

        assert deleted == created
        assert await _kind_of(task_store.get_task(created["id"])) is StoreErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_delete_missing(self, task_store):
        assert await _kind_of(task_store.delete_task("3")) is StoreErrorKind.NOT_FOUND


class TestInitDb:

    def test_seed_is_idempotent(self, engine):
        with create_session_factory(engine)() as db:
            assert seed_example_task(db) is True
            assert seed_example_task(db) is False
            assert db.query(Task).count() == 1
            assert db.query(Task).first().titulo == EXAMPLE_TITLE

    def test_init_db_creates_file_database(self, tmp_path):
        db_url = f"sqlite:///{tmp_path / 'tarefas.db'}"

        init_db(db_url, seed=True)
        init_db(db_url, seed=True)

        engine = create_db_engine(db_url)
        try:
            with create_session_factory(engine)() as db:
                assert db.query(Task).count() == 1
        finally:
            engine.dispose()

    def test_app_startup_creates_tables(self, tmp_path):
        app = create_app(make_settings(db_url=f"sqlite:///{tmp_path / 'app.db'}"))

        with TestClient(app):
            assert inspect(app.state.engine).has_table("tarefas")
