"""
Pydantic schemas for task records.

The HTTP layer passes request payloads through untouched; these models
only shape what the default store returns.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class TaskResponse(BaseModel):
    """
    Serialized task.

    Returned by every task endpoint that yields a single record, and as
    the element type of GET /tarefas.
    """
    id: int = Field(..., description="Task ID")
    titulo: str = Field(..., description="Task title")
    descricao: Optional[str] = Field(None, description="Optional description")
    completa: bool = Field(False, description="Whether the task is complete")
    criada_em: datetime = Field(..., description="Creation timestamp")
    atualizada_em: Optional[datetime] = Field(None, description="Last update timestamp")

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "example": {
                "id": 1,
                "titulo": "Comprar pão",
                "descricao": None,
                "completa": False,
                "criada_em": "2026-01-30T10:30:00",
                "atualizada_em": "2026-01-30T10:30:00",
            }
        }
    }
