"""
SQLAlchemy ORM models for the Tarefas system.

A single table holds the task records owned by the default task store.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    Boolean,
)
from sqlalchemy.orm import declarative_base


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# Base class for all models
Base = declarative_base()

TITLE_MAX_LENGTH = 200


class Task(Base):
    """
    Task ("tarefa") record.

    Attributes:
        id: Primary key
        titulo: Short title, required
        descricao: Optional free-text description
        completa: Whether the task has been completed
        criada_em: Creation timestamp
        atualizada_em: Last update timestamp
    """
    __tablename__ = "tarefas"

    id = Column(Integer, primary_key=True, index=True)
    titulo = Column(String(TITLE_MAX_LENGTH), nullable=False)
    descricao = Column(Text, nullable=True)
    completa = Column(Boolean, default=False, nullable=False)
    criada_em = Column(DateTime, default=utc_now, nullable=False)
    atualizada_em = Column(
        DateTime,
        default=utc_now,
        onupdate=utc_now,
        nullable=False
    )

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, titulo='{self.titulo}', completa={self.completa})>"
