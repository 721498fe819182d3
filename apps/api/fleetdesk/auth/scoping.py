"""Per-account row scoping.

Every Customer, Vehicle and Employee row carries ``created_by_id``; Orders,
Units and tracking events inherit the owner of their parent row. No role sees
another account's rows unless the policy is explicitly built with that role
exempted.
"""

from collections.abc import Iterable
from typing import Any, TypeVar

from fastapi import HTTPException
from sqlalchemy import Select

from fleetdesk.auth.dependencies import AuthContext
from fleetdesk.config import settings
from fleetdesk.errors import forbidden, not_found
from fleetdesk.observability import log_event

SelectT = TypeVar("SelectT", bound=Select)


class OwnershipPolicy:
    def __init__(
        self,
        exempt_roles: Iterable[str] = (),
        violation_mode: str | None = None,
    ) -> None:
        self._exempt_roles = frozenset(exempt_roles)
        self._violation_mode = violation_mode

    @property
    def violation_mode(self) -> str:
        return self._violation_mode or settings.scope_violation_mode

    @property
    def hides_foreign_rows(self) -> bool:
        """True when out-of-scope rows are reported as missing rather than forbidden."""
        return self.violation_mode == "not_found"

    def can_see_all_data(self, role: str) -> bool:
        return role in self._exempt_roles

    def owns(self, auth: AuthContext, owner_id: str | None) -> bool:
        if self.can_see_all_data(auth.role):
            return True
        return owner_id is not None and owner_id == auth.account_id

    def violation(self, entity: str) -> HTTPException:
        if self.hides_foreign_rows:
            return not_found(entity)
        return forbidden()

    def ensure_owner(self, auth: AuthContext, owner_id: str | None, entity: str) -> None:
        if self.owns(auth, owner_id):
            return
        log_event("scope_violation", account_id=auth.account_id)
        raise self.violation(entity)

    def scope(self, statement: SelectT, owner_column: Any, auth: AuthContext) -> SelectT:
        if self.can_see_all_data(auth.role):
            return statement
        return statement.where(owner_column == auth.account_id)


default_ownership_policy = OwnershipPolicy()


def get_ownership_policy() -> OwnershipPolicy:
    return default_ownership_policy
