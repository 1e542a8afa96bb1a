"""
Pydantic schemas for authentication.

Defines the GitHub profile returned by the identity provider and the
principal kept in the session after login.
"""

from typing import Optional

from pydantic import BaseModel, Field


class GitHubProfile(BaseModel):
    """
    Subset of the GitHub ``/user`` response.

    Unknown fields from the API are ignored.
    """
    id: int = Field(..., description="GitHub user ID")
    login: str = Field(..., description="GitHub username")
    name: Optional[str] = Field(None, description="Public display name")
    email: Optional[str] = Field(None, description="Public email")

    @property
    def display_name(self) -> str:
        return self.name or self.login


class Principal(BaseModel):
    """
    Authenticated principal as stored in the session.

    Only the display name is retained.
    """
    usuario: str = Field(..., description="Display name of the logged-in user")

    model_config = {
        "json_schema_extra": {
            "example": {
                "usuario": "Maria Silva"
            }
        }
    }
