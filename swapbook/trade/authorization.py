"""Privilege policy: which user types may run which lifecycle operations.

PrivilegeAuthorizer implements the Authorizer protocol over an in-process
user directory. ADMIN and SUPER_USER may do everything; other user types
get the operation sets in USER_TYPE_OPERATIONS, extended by any explicit
per-user grants. Unknown and inactive users are always denied.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import final

from swapbook.core.errors import UnauthorizedError
from swapbook.core.result import Err, Ok
from swapbook.core.types import UtcDatetime
from swapbook.infra.protocols import TradeContext
from swapbook.trade.types import Operation

logger = logging.getLogger(__name__)


class UserType(Enum):
    TRADER = "TRADER"
    SALES = "SALES"
    MIDDLE_OFFICE = "MIDDLE_OFFICE"
    SUPPORT = "SUPPORT"
    ADMIN = "ADMIN"
    SUPER_USER = "SUPER_USER"


UNRESTRICTED_USER_TYPES: frozenset[UserType] = frozenset({UserType.ADMIN, UserType.SUPER_USER})

USER_TYPE_OPERATIONS: dict[UserType, frozenset[Operation]] = {
    UserType.TRADER: frozenset({
        Operation.CREATE_TRADE,
        Operation.AMEND_TRADE,
        Operation.TERMINATE_TRADE,
        Operation.CANCEL_TRADE,
    }),
    UserType.SALES: frozenset({Operation.CREATE_TRADE, Operation.AMEND_TRADE}),
    UserType.MIDDLE_OFFICE: frozenset({Operation.AMEND_TRADE, Operation.VIEW_TRADE}),
    UserType.SUPPORT: frozenset({Operation.VIEW_TRADE}),
}


@final
@dataclass(frozen=True, slots=True)
class UserProfile:
    """An application user as the authorizer sees it."""

    user_id: int
    user_type: UserType
    active: bool = True
    grants: frozenset[Operation] = frozenset()

    def allows(self, operation: Operation) -> bool:
        if self.user_type in UNRESTRICTED_USER_TYPES:
            return True
        return operation in USER_TYPE_OPERATIONS.get(self.user_type, frozenset()) | self.grants


@final
@dataclass
class PrivilegeAuthorizer:
    """Authorizer backed by a dict of user profiles."""

    _users: dict[int, UserProfile] = field(default_factory=dict)

    def register(self, profile: UserProfile) -> None:
        self._users[profile.user_id] = profile

    def authorize(
        self, user_id: int, operation: Operation, context: TradeContext,
    ) -> Ok[None] | Err[UnauthorizedError]:
        profile = self._users.get(user_id)
        if profile is None:
            return self._deny(user_id, operation, "User is not known")
        if not profile.active:
            return self._deny(user_id, operation, "User must be active")
        if not profile.allows(operation):
            return self._deny(
                user_id, operation, f"User does not have authorization {operation.value}",
            )
        logger.debug("User %s authorized for %s on trade %s", user_id, operation.value, context.trade_id)
        return Ok(None)

    @staticmethod
    def _deny(user_id: int, operation: Operation, reason: str) -> Err[UnauthorizedError]:
        logger.warning("Denied %s for user %s: %s", operation.value, user_id, reason)
        return Err(UnauthorizedError(
            message=reason,
            code="UNAUTHORIZED",
            timestamp=UtcDatetime.now(),
            source="trade.authorization.PrivilegeAuthorizer.authorize",
            user_id=user_id,
            operation=operation.value,
        ))
