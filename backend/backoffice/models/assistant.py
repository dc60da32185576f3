"""
Modèle SQLAlchemy pour les assistants (personnel suivi dans la grille).
L'identifiant est le numéro de document nettoyé (voir sanitize_doc_id).
"""

from sqlalchemy import Boolean, Column, DateTime, String, func

from backoffice.database import Base


class Assistant(Base):
    __tablename__ = "assistants"

    id = Column(String(120), primary_key=True)
    full_name = Column(String(255), nullable=False)
    document_number = Column(String(120), nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    created_by = Column(String(255), nullable=True)         # Email de l'administrateur
    created_at = Column(DateTime, server_default=func.now())
