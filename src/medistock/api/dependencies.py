"""Request-scoped identity: who is calling, and may they do this."""

import structlog
from fastapi import Depends, Header
from protean.utils.globals import current_domain

from medistock.exceptions import NotAuthenticatedError
from medistock.identity.policy import Action, Caller, authorize
from medistock.identity.tokens import decode_token
from medistock.identity.user import User


def _bearer_token(authorization: str | None, x_auth_token: str | None) -> str | None:
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    if x_auth_token and x_auth_token.strip():
        return x_auth_token.strip()
    return None


async def current_caller(
    authorization: str | None = Header(None),
    x_auth_token: str | None = Header(None),
) -> Caller:
    """The verified caller.

    The token's role claim must still match the stored role, so a demoted
    admin's old token stops working.
    """
    token = _bearer_token(authorization, x_auth_token)
    if token is None:
        raise NotAuthenticatedError("No token, authorization denied")

    claim = decode_token(token)
    user = current_domain.repository_for(User).get_or_none(claim["id"])
    if user is None:
        raise NotAuthenticatedError("Token no longer valid")
    if user.role != claim["role"]:
        raise NotAuthenticatedError("Token no longer valid")

    structlog.contextvars.bind_contextvars(user_id=str(user.id))
    return Caller(user_id=str(user.id), role=user.role)


def require(action: Action):
    """A dependency that lets the request through only if ``action`` is allowed."""

    async def dependency(caller: Caller = Depends(current_caller)) -> Caller:
        authorize(caller, action)
        return caller

    return dependency
