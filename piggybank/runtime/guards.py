from __future__ import annotations

from typing import Any, Mapping, Optional, Type

from ..errors import BankError


def require(
    condition: bool,
    message: str = "require failed",
    *,
    error: Type[BankError] = BankError,
    context: Optional[Mapping[str, Any]] = None,
) -> None:
    """
    Assertion helper for contract handlers.

    Usage:

        require(state.is_intact, "already smashed", error=InvalidStateError)
        require(sender.matches_account(owner), "owner only", error=UnauthorizedError)
    """
    if condition:
        return
    raise error(message, context=dict(context or {}))


__all__ = ["require"]
