"""
Task store: persistence for task records.

Route handlers depend only on the async ``TaskStore`` protocol.
``SqlTaskStore`` is the default implementation backed by SQLAlchemy; it
runs the blocking ORM work in Starlette's threadpool so a slow query
never stalls other in-flight requests.

Failures are reported as ``TaskStoreError`` tagged with a
``StoreErrorKind``. Database driver errors are not domain errors and
propagate unchanged.
"""

import logging
from typing import Any, Dict, List, Optional, Protocol

from sqlalchemy.orm import Session, sessionmaker
from starlette.concurrency import run_in_threadpool

from tarefas.core.errors import TaskStoreError
from tarefas.db.models import Task, TITLE_MAX_LENGTH
from tarefas.schemas.task import TaskResponse


logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("titulo", "descricao", "completa")


class TaskStore(Protocol):
    """Async interface the route handlers delegate to."""

    async def list_tasks(self) -> List[Dict[str, Any]]: ...

    async def get_task(self, task_id: Any) -> Dict[str, Any]: ...

    async def create_task(self, data: Any) -> Dict[str, Any]: ...

    async def update_task(self, task_id: Any, data: Any) -> Dict[str, Any]: ...

    async def delete_task(self, task_id: Any) -> Dict[str, Any]: ...


def parse_task_id(task_id: Any) -> int:
    """
    Convert a raw path value into a task ID.

    Raises:
        TaskStoreError: VALIDATION if the value is not a positive integer
    """
    if isinstance(task_id, bool):
        raise TaskStoreError.validation("id da tarefa inválido")
    if isinstance(task_id, int):
        value = task_id
    elif isinstance(task_id, str) and task_id.strip().isdecimal():
        value = int(task_id.strip())
    else:
        raise TaskStoreError.validation("id da tarefa inválido")
    if value <= 0:
        raise TaskStoreError.validation("id da tarefa inválido")
    return value


def validate_task_data(data: Any, partial: bool) -> Dict[str, Any]:
    """
    Validate a create or update payload.

    Args:
        data: Payload as decoded from the request body
        partial: True for updates, where every field is optional

    Returns:
        Cleaned field values ready to be applied to a Task

    Raises:
        TaskStoreError: VALIDATION describing the first problem found
    """
    if not isinstance(data, dict):
        raise TaskStoreError.validation("dados da tarefa inválidos")

    for key in data:
        if key not in EDITABLE_FIELDS:
            raise TaskStoreError.validation(f"campo desconhecido: {key}")

    cleaned: Dict[str, Any] = {}

    if "titulo" in data or not partial:
        titulo = data.get("titulo")
        if not isinstance(titulo, str) or not titulo.strip():
            raise TaskStoreError.validation("título obrigatório")
        titulo = titulo.strip()
        if len(titulo) > TITLE_MAX_LENGTH:
            raise TaskStoreError.validation("título muito longo")
        cleaned["titulo"] = titulo

    if "descricao" in data:
        descricao = data["descricao"]
        if descricao is not None and not isinstance(descricao, str):
            raise TaskStoreError.validation("descrição inválida")
        cleaned["descricao"] = descricao

    if "completa" in data:
        if not isinstance(data["completa"], bool):
            raise TaskStoreError.validation("completa deve ser verdadeiro ou falso")
        cleaned["completa"] = data["completa"]

    if partial and not cleaned:
        raise TaskStoreError.validation("nenhum campo para atualizar")

    return cleaned


def serialize_task(task: Task) -> Dict[str, Any]:
    return TaskResponse.model_validate(task).model_dump(mode="json")


class SqlTaskStore:
    """
    SQLAlchemy-backed task store.

    Each operation opens its own session from ``session_factory`` and
    commits before returning.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    async def list_tasks(self) -> List[Dict[str, Any]]:
        return await run_in_threadpool(self._list_tasks)

    async def get_task(self, task_id: Any) -> Dict[str, Any]:
        return await run_in_threadpool(self._get_task, task_id)

    async def create_task(self, data: Any) -> Dict[str, Any]:
        return await run_in_threadpool(self._create_task, data)

    async def update_task(self, task_id: Any, data: Any) -> Dict[str, Any]:
        return await run_in_threadpool(self._update_task, task_id, data)

    async def delete_task(self, task_id: Any) -> Dict[str, Any]:
        return await run_in_threadpool(self._delete_task, task_id)

    # --- blocking implementations ---

    def _list_tasks(self) -> List[Dict[str, Any]]:
        with self._session_factory() as db:
            tasks = db.query(Task).order_by(Task.id).all()
            return [serialize_task(task) for task in tasks]

    def _get_task(self, task_id: Any) -> Dict[str, Any]:
        task_pk = parse_task_id(task_id)
        with self._session_factory() as db:
            return serialize_task(self._require(db, task_pk))

    def _create_task(self, data: Any) -> Dict[str, Any]:
        fields = validate_task_data(data, partial=False)
        with self._session_factory() as db:
            task = Task(**fields)
            db.add(task)
            db.commit()
            db.refresh(task)
            logger.info("Created task %s", task.id)
            return serialize_task(task)

    def _update_task(self, task_id: Any, data: Any) -> Dict[str, Any]:
        task_pk = parse_task_id(task_id)
        fields = validate_task_data(data, partial=True)
        with self._session_factory() as db:
            task = self._require(db, task_pk)
            for name, value in fields.items():
                setattr(task, name, value)
            db.commit()
            db.refresh(task)
            logger.info("Updated task %s (%s)", task.id, ", ".join(sorted(fields)))
            return serialize_task(task)

    def _delete_task(self, task_id: Any) -> Dict[str, Any]:
        task_pk = parse_task_id(task_id)
        with self._session_factory() as db:
            task = self._require(db, task_pk)
            deleted = serialize_task(task)
            db.delete(task)
            db.commit()
            logger.info("Deleted task %s", task_pk)
            return deleted

    @staticmethod
    def _require(db: Session, task_pk: int) -> Task:
        task: Optional[Task] = db.get(Task, task_pk)
        if task is None:
            raise TaskStoreError.not_found()
        return task
