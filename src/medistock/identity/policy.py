"""Access policy: who may do what.

Every operation that needs a decision calls ``authorize`` with the request's
``Caller``. Nothing else in the codebase inspects roles.
"""

from dataclasses import dataclass
from enum import Enum

from medistock.exceptions import NotAuthorizedError
from medistock.identity.user import Role


class Action(Enum):
    PROFILE_MANAGE = "profile:manage"
    ORDER_PLACE = "order:place"
    ORDER_LIST = "order:list"
    ORDER_VIEW = "order:view"
    CATALOGUE_MANAGE = "catalogue:manage"
    ORDER_MANAGE = "order:manage"
    ORDER_STATS = "order:stats"
    USER_MANAGE = "user:manage"


_ANY_CALLER = {Action.PROFILE_MANAGE, Action.ORDER_PLACE, Action.ORDER_LIST}
_OWNER_OR_ADMIN = {Action.ORDER_VIEW}
_ADMIN_ONLY = {
    Action.CATALOGUE_MANAGE,
    Action.ORDER_MANAGE,
    Action.ORDER_STATS,
    Action.USER_MANAGE,
}


@dataclass(frozen=True)
class Caller:
    """The verified identity behind one request."""

    user_id: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    def owns(self, owner_id) -> bool:
        return owner_id is not None and str(owner_id) == str(self.user_id)


def is_allowed(caller: Caller, action: Action, owner_id=None) -> bool:
    if action in _ANY_CALLER:
        return True
    if action in _OWNER_OR_ADMIN:
        return caller.is_admin or caller.owns(owner_id)
    if action in _ADMIN_ONLY:
        return caller.is_admin
    return False


def authorize(caller: Caller, action: Action, owner_id=None) -> None:
    """Raise ``NotAuthorizedError`` unless ``caller`` may perform ``action``."""
    if not is_allowed(caller, action, owner_id):
        raise NotAuthorizedError("Not authorized")
