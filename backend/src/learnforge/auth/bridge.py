"""Identity bridge from an external provider into the local user directory."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from learnforge.auth.types import BridgedIdentity, ExternalProfile, Role
from learnforge.errors import ConflictError, ValidationError

if TYPE_CHECKING:
    from learnforge.persistence.adapter import UserDirectory

logger = logging.getLogger(__name__)

# Role given to accounts created by the bridge until the user picks one
PROVISIONAL_ROLE = Role.STUDENT


class IdentityBridge:
    """Resolves external provider profiles to credential records.

    This is the only code path that creates records without a password hash.
    Callers must send users flagged ``is_new_user`` through role selection
    before treating their session as final.
    """

    def __init__(self, directory: UserDirectory):
        self._directory = directory

    def resolve(self, profile: ExternalProfile) -> BridgedIdentity:
        """Find the record for a profile's primary email, creating it if absent.

        Raises:
            ValidationError: If the profile carries no email
            DirectoryUnavailableError: If the directory cannot be reached
        """
        email = (profile.email or "").strip()
        if not email:
            raise ValidationError(f"{profile.provider} profile has no email address")

        existing = self._directory.get_by_email(email)
        if existing:
            return BridgedIdentity(record=existing, is_new_user=False)

        name = (profile.display_name or "").strip() or email.split("@", 1)[0]
        try:
            record = self._directory.create(
                name=name,
                email=email,
                role=PROVISIONAL_ROLE,
                password_hash=None,
            )
        except ConflictError:
            # Created by a concurrent callback between lookup and insert
            existing = self._directory.get_by_email(email)
            if existing is None:
                raise
            return BridgedIdentity(record=existing, is_new_user=False)

        logger.info(
            "Created user %s from %s sign-in (pending role selection)",
            record.id,
            profile.provider,
        )
        return BridgedIdentity(record=record, is_new_user=True)
