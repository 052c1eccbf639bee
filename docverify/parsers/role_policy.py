"""
Política de documents acceptats per rol d'usuari
"""
import logging
from typing import Dict, Tuple
from dataclasses import dataclass
from docverify.models.verification import DocumentType, RolePolicyDecision

log = logging.getLogger("docverify.verify")

DEFAULT_ROLE = "tenant"


@dataclass(frozen=True)
class RolePolicy:
    allowed: Tuple[DocumentType, ...]
    preferred: Tuple[DocumentType, ...]
    min_confidence: float


ROLE_POLICIES: Dict[str, RolePolicy] = {
    "tenant": RolePolicy(
        allowed=(DocumentType.PAN, DocumentType.AADHAAR, DocumentType.PASSPORT, DocumentType.DRIVING_LICENSE),
        preferred=(DocumentType.PAN, DocumentType.AADHAAR),
        min_confidence=0.80,
    ),
    "owner": RolePolicy(
        allowed=(DocumentType.PAN, DocumentType.AADHAAR, DocumentType.PASSPORT),
        preferred=(DocumentType.PAN, DocumentType.AADHAAR),
        min_confidence=0.85,
    ),
    "admin": RolePolicy(
        allowed=(DocumentType.PAN, DocumentType.AADHAAR, DocumentType.PASSPORT),
        preferred=(DocumentType.PAN,),
        min_confidence=0.90,
    ),
}


def resolve_role(role: str) -> str:
    """Rol normalitzat; un rol desconegut rep la política de tenant."""
    key = (role or "").strip().lower()
    if key not in ROLE_POLICIES:
        log.warning("role_unknown_defaulting", extra={"role": role, "default_role": DEFAULT_ROLE})
        return DEFAULT_ROLE
    return key


def check_role(document_type: DocumentType, role: str) -> RolePolicyDecision:
    """
    Decideix si el rol accepta el tipus de document.
    min_confidence és orientatiu: no bloqueja la verificació.
    """
    role_key = resolve_role(role)
    policy = ROLE_POLICIES[role_key]

    if document_type not in policy.allowed:
        allowed = ", ".join(t.value for t in policy.allowed)
        return RolePolicyDecision(
            allowed=False,
            preferred=False,
            min_confidence=policy.min_confidence,
            message=f"{document_type.value} is not accepted for {role_key} registration. "
                    f"Allowed documents: {allowed}",
        )

    preferred = document_type in policy.preferred
    message = f"{document_type.value} is accepted for {role_key} registration"
    if preferred:
        message += " (preferred document)"
    return RolePolicyDecision(
        allowed=True,
        preferred=preferred,
        min_confidence=policy.min_confidence,
        message=message,
    )
