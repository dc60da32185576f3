"""
Schémas Pydantic pour la gestion des assistants.
"""

from pydantic import BaseModel, field_validator


class AssistantCreate(BaseModel):
    """Création d'un assistant (POST /assistants)."""
    full_name: str
    document_number: str

    @field_validator("full_name", "document_number")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le champ ne peut pas être vide.")
        return v.strip()
