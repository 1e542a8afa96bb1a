"""Database module - SQLAlchemy models, session management and task store."""

from .models import Base, Task
from .session import create_db_engine, create_session_factory
from .init_db import create_tables
from .task_store import SqlTaskStore, TaskStore

__all__ = [
    "Base",
    "Task",
    "create_db_engine",
    "create_session_factory",
    "create_tables",
    "SqlTaskStore",
    "TaskStore",
]
