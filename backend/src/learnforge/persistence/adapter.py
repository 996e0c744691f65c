"""UserDirectory Protocol: the storage interface the auth flows need."""

from typing import Protocol, runtime_checkable

from learnforge.auth.types import CredentialRecord, Role


@runtime_checkable
class UserDirectory(Protocol):
    """Interface all user directories must implement.

    Matches the public API of SQLUserDirectory. Implementations raise
    ``DirectoryUnavailableError`` when the backing store cannot be reached
    and ``ConflictError`` when an email is already taken.
    """

    def get_by_email(self, email: str) -> CredentialRecord | None: ...

    def get_by_id(self, user_id: int) -> CredentialRecord | None: ...

    def create(
        self,
        name: str,
        email: str,
        role: Role,
        password_hash: str | None = None,
    ) -> CredentialRecord: ...

    def update_role(self, user_id: int, role: Role) -> CredentialRecord | None: ...
