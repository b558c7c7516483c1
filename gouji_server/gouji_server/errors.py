"""Rule engine errors."""

from enum import IntEnum


class ErrorCode(IntEnum):
    """Error codes reported to clients."""

    NONE = 0
    EMPTY_INPUT = 1
    ILLEGAL_COMPOSITION = 2
    INSUFFICIENT_HAND = 3
    ILLEGAL_RESIDUAL = 4
    NOT_GREATER = 5


class GoujiError(Exception):
    """Base class for recoverable rule violations."""

    code = ErrorCode.NONE


class EmptyInputError(GoujiError):
    """A card set was built from zero cards."""

    code = ErrorCode.EMPTY_INPUT


class IllegalCompositionError(GoujiError):
    """Cards cannot form a uniform-rank group."""

    code = ErrorCode.ILLEGAL_COMPOSITION


class InsufficientHandError(GoujiError):
    """The hand does not hold every card of the set."""

    code = ErrorCode.INSUFFICIENT_HAND


class IllegalResidualError(GoujiError):
    """The hand left after a play breaks the 3 or 4 rule."""

    code = ErrorCode.ILLEGAL_RESIDUAL


class NotGreaterError(GoujiError):
    """The play does not beat the set on the field."""

    code = ErrorCode.NOT_GREATER
