"""
Error taxonomy and the error-to-HTTP-status policy.

Every task route maps failures through ``map_store_error`` using one of
the ``StoreOperation`` constants below, so the 400/404/500 choice lives
in a single table instead of being repeated in each handler.
"""

import enum
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from fastapi import status


logger = logging.getLogger(__name__)

NOT_AUTHENTICATED_MESSAGE = "Não autenticado com GitHub"
INVALID_BODY_MESSAGE = "Corpo da requisição inválido"
INTERNAL_ERROR_MESSAGE = "Erro interno do servidor"


class APIError(Exception):
    """Error rendered to the client as ``{"error": message}``."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class NotAuthenticatedError(APIError):
    """Raised by the authorization gate only."""

    def __init__(self) -> None:
        super().__init__(NOT_AUTHENTICATED_MESSAGE, status.HTTP_401_UNAUTHORIZED)


class StoreErrorKind(str, enum.Enum):
    """
    Kind of a task store failure.

    - VALIDATION: the input was malformed
    - NOT_FOUND: the task does not exist
    """
    VALIDATION = "validation"
    NOT_FOUND = "not_found"


class TaskStoreError(Exception):
    """Domain failure raised by a task store, tagged with its kind."""

    def __init__(self, kind: StoreErrorKind, message: str):
        self.kind = kind
        self.message = message
        super().__init__(message)

    @classmethod
    def validation(cls, message: str) -> "TaskStoreError":
        return cls(StoreErrorKind.VALIDATION, message)

    @classmethod
    def not_found(cls, message: str = "tarefa não encontrada") -> "TaskStoreError":
        return cls(StoreErrorKind.NOT_FOUND, message)


@dataclass(frozen=True)
class StoreOperation:
    """
    Error mapping for one route.

    Attributes:
        name: Operation name used in log records
        fallback_message: Message returned with 500 for unrecognized errors
        status_by_kind: HTTP status for each store error kind
    """
    name: str
    fallback_message: str
    status_by_kind: Mapping[StoreErrorKind, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "status_by_kind", MappingProxyType(dict(self.status_by_kind)))


def _uniform(code: int) -> Mapping[StoreErrorKind, int]:
    return {kind: code for kind in StoreErrorKind}


_VALIDATION_OR_NOT_FOUND = {
    StoreErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    StoreErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
}

LIST_TASKS = StoreOperation("list_tasks", "Erro ao obter tarefas", _uniform(status.HTTP_404_NOT_FOUND))
GET_TASK = StoreOperation("get_task", "Erro ao obter a tarefa", _uniform(status.HTTP_404_NOT_FOUND))
# Create has no "not found" outcome; every store error is a bad request
CREATE_TASK = StoreOperation("create_task", "Erro ao criar tarefa", _uniform(status.HTTP_400_BAD_REQUEST))
UPDATE_TASK = StoreOperation("update_task", "Erro ao atualizar a tarefa", _VALIDATION_OR_NOT_FOUND)
DELETE_TASK = StoreOperation("delete_task", "Erro ao deletar a tarefa", _VALIDATION_OR_NOT_FOUND)
COMPLETE_TASK = StoreOperation(
    "complete_task", "Erro ao marcar a tarefa como completa", _VALIDATION_OR_NOT_FOUND
)
INCOMPLETE_TASK = StoreOperation(
    "incomplete_task", "Erro ao marcar a tarefa como incompleta", _VALIDATION_OR_NOT_FOUND
)


def map_store_error(exc: Exception, operation: StoreOperation) -> APIError:
    """
    Translate an exception raised during a store call into an APIError.

    The error is logged before mapping. Store-domain errors keep their
    message and get the status from the operation table; anything else
    becomes a 500 with the operation's generic message.

    Args:
        exc: The exception caught at the handler boundary
        operation: Mapping policy of the route that caught it

    Returns:
        APIError ready to be raised
    """
    if isinstance(exc, TaskStoreError):
        status_code = operation.status_by_kind.get(exc.kind)
        if status_code is not None:
            logger.warning(
                "%s failed (%s): %s", operation.name, exc.kind.value, exc.message
            )
            return APIError(exc.message, status_code)

    logger.error("%s failed unexpectedly", operation.name, exc_info=exc)
    return APIError(operation.fallback_message, status.HTTP_500_INTERNAL_SERVER_ERROR)
