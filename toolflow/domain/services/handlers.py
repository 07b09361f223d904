"""Invoke user callbacks that may be sync or async and may or may not take `meta`."""

import inspect
from collections.abc import Callable
from typing import Any


def accepts_meta(fn: Callable[..., Any]) -> bool:
    """True if `fn` can be called positionally with (state, meta)."""
    try:
        params = inspect.signature(fn).parameters.values()
    except (TypeError, ValueError):
        return False
    positional = 0
    for p in params:
        if p.kind is inspect.Parameter.VAR_POSITIONAL:
            return True
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            positional += 1
    return positional >= 2


async def invoke(fn: Callable[..., Any], state: dict[str, Any], meta: dict[str, Any] | None = None) -> Any:
    """Call a handler/selector/callback with a copy of state, awaiting if needed."""
    args: tuple[Any, ...] = (dict(state), meta) if accepts_meta(fn) else (dict(state),)
    result = fn(*args)
    if inspect.isawaitable(result):
        result = await result
    return result
