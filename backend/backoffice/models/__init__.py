# Importe tous les modèles pour enregistrer leurs tables dans Base.metadata
# avant la création du schéma (assistance.assistant_id → assistants.id).

from backoffice.models.assistant import Assistant  # noqa: F401  : doit précéder assistance
from backoffice.models.assistance import AssistanceDoc  # noqa: F401
