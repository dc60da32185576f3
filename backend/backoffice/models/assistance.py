"""
Modèle SQLAlchemy pour les documents d'assistance mensuels.

Un document par (assistant, mois), identifiant "{assistant_id}_{YYYY-MM}" :
- days   : {"YYYY-MM-DD": "P" | "A" | "T" | "J"}
- notes  : {"YYYY-MM-DD": "texte"}
- totals : instantané recalculé à chaque écriture (informatif, jamais relu comme vérité)
"""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, func

from backoffice.database import Base


class AssistanceDoc(Base):
    __tablename__ = "assistance"

    id = Column(String(140), primary_key=True)
    assistant_id = Column(String(120), ForeignKey("assistants.id", ondelete="CASCADE"), nullable=False, index=True)
    month = Column(String(7), nullable=False, index=True)    # YYYY-MM

    days = Column(JSON, nullable=False, default=dict)
    notes = Column(JSON, nullable=False, default=dict)
    totals = Column(JSON, nullable=True)

    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
