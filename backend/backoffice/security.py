"""
Identité de l'appelant.

La vérification du jeton est faite en amont par le proxy d'authentification,
qui transmet l'email et le rôle de l'utilisateur dans les en-têtes
X-User-Email / X-User-Role.
"""

from dataclasses import dataclass
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException

from backoffice.config import settings

EmailHeader = Annotated[Optional[str], Header(alias="X-User-Email")]
RoleHeader = Annotated[Optional[str], Header(alias="X-User-Role")]


@dataclass(frozen=True)
class Actor:
    email: str
    role: str


def get_actor(x_user_email: EmailHeader = None, x_user_role: RoleHeader = None) -> Actor:
    """Refuse (403) un appelant sans rôle attribué."""
    role = (x_user_role or "").strip()
    if not role:
        raise HTTPException(status_code=403, detail="Accès refusé : aucun rôle attribué.")
    return Actor(email=(x_user_email or "").strip(), role=role)


def require_admin(actor: Actor = Depends(get_actor)) -> Actor:
    """Réservé aux rôles administrateurs (ADMIN_ROLES)."""
    if actor.role not in settings.admin_roles:
        raise HTTPException(status_code=403, detail="Accès refusé : permissions insuffisantes.")
    return actor
