"""Authentication module for LearnForge."""

from learnforge.auth.types import (
    BridgedIdentity,
    CredentialRecord,
    ExternalProfile,
    Principal,
    Role,
    TokenClaims,
    TokenClass,
    TokenPair,
)
from learnforge.auth.password import PasswordService
from learnforge.auth.jwt_service import JWTService
from learnforge.auth.cookies import (
    ALL_SLOT_NAMES,
    clear_session_cookies,
    set_session_cookies,
    slot_names,
    transport_attributes,
)
from learnforge.auth.bridge import IdentityBridge
from learnforge.auth.middleware import (
    authenticate_any_token,
    authenticate_token,
    get_principal,
)
from learnforge.auth.dependencies import (
    authorize_roles,
    require_authenticated,
)
from learnforge.auth.service import AuthFlowService

__all__ = [
    "BridgedIdentity",
    "CredentialRecord",
    "ExternalProfile",
    "Principal",
    "Role",
    "TokenClaims",
    "TokenClass",
    "TokenPair",
    "PasswordService",
    "JWTService",
    "ALL_SLOT_NAMES",
    "clear_session_cookies",
    "set_session_cookies",
    "slot_names",
    "transport_attributes",
    "IdentityBridge",
    "authenticate_any_token",
    "authenticate_token",
    "get_principal",
    "authorize_roles",
    "require_authenticated",
    "AuthFlowService",
]
