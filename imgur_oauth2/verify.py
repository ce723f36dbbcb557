"""
Verify callback dispatch.

The host application hands the strategy a verify callback that turns the
Imgur identity into one of its own users. Three callback shapes are
supported, told apart by their positional arity:

- ``verify(access_token, refresh_token, profile)`` returning the user
- ``verify(access_token, refresh_token, profile, done)``
- ``verify(access_token, refresh_token, params, profile, done)``

With ``pass_request_to_callback`` the current request is passed first.
``done(err, user=None, info=None)`` reports the outcome; a falsy ``user``
means the identity was rejected.
"""

import inspect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from .exceptions import AuthenticationError, ConfigurationError

logger = logging.getLogger(__name__)


class VerifyStyle(Enum):
    RETURN = "return"
    DONE = "done"
    PARAMS_DONE = "params_done"


_STYLE_BY_ARITY = {
    3: VerifyStyle.RETURN,
    4: VerifyStyle.DONE,
    5: VerifyStyle.PARAMS_DONE,
}

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


@dataclass
class VerifyResult:
    user: Any
    info: Any = None


def resolve_verify_style(verify: Callable, pass_request: bool = False) -> VerifyStyle:
    """
    Determine which shape a verify callback has.

    Raises:
        ConfigurationError: If the callback matches none of the supported shapes
    """
    if not callable(verify):
        raise ConfigurationError("Imgur OAuth2 strategy requires a verify callback")

    try:
        signature = inspect.signature(verify)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Cannot inspect verify callback: {e}") from e

    arity = 0
    for parameter in signature.parameters.values():
        if parameter.kind == inspect.Parameter.VAR_POSITIONAL:
            return VerifyStyle.DONE
        if parameter.kind in _POSITIONAL:
            arity += 1

    if pass_request:
        arity -= 1

    style = _STYLE_BY_ARITY.get(arity)
    if style is None:
        raise ConfigurationError(
            f"Unsupported verify callback arity {arity}; expected 3, 4 or 5 "
            f"positional arguments{' after the request' if pass_request else ''}"
        )
    return style


class _Done:
    """The ``done`` callable handed to callback-style verify functions."""

    def __init__(self):
        self.called = False
        self.error = None
        self.user = None
        self.info = None

    def __call__(self, err=None, user=None, info=None):
        if self.called:
            logger.warning("verify callback called done more than once; ignoring")
            return
        self.called = True
        self.error = err
        self.user = user
        self.info = info


def invoke_verify(
    verify: Callable,
    style: VerifyStyle,
    access_token: str,
    refresh_token: Optional[str],
    profile,
    params: Optional[dict] = None,
    request=None,
    pass_request: bool = False,
) -> VerifyResult:
    """
    Call the verify callback and collect its outcome.

    Exceptions raised by the callback, or passed to ``done``, propagate
    unchanged.
    """
    args = [request] if pass_request else []

    if style is VerifyStyle.RETURN:
        return VerifyResult(user=verify(*args, access_token, refresh_token, profile))

    done = _Done()
    if style is VerifyStyle.DONE:
        verify(*args, access_token, refresh_token, profile, done)
    else:
        verify(*args, access_token, refresh_token, params, profile, done)

    if not done.called:
        raise AuthenticationError("verify callback returned without calling done")

    if done.error is not None:
        if isinstance(done.error, BaseException):
            raise done.error
        raise AuthenticationError(str(done.error))

    return VerifyResult(user=done.user, info=done.info)
