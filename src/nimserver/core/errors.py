"""Error hierarchy for the game engine.

Every failure the engine reports is one of four kinds, and callers at the
HTTP boundary map each kind to its own status code::

    from nimserver.core.errors import IllegalMove

    try:
        service.make_move(game_id, 3)
    except IllegalMove as exc:
        print(exc.message)

``UnknownStrategy`` subclasses ``InvalidConfiguration`` so creation-time and
resolution-time checks of the strategy id can be caught together.
"""

from __future__ import annotations

__all__ = [
    "IllegalMove",
    "InvalidConfiguration",
    "NimError",
    "NotFound",
    "UnknownStrategy",
]


class NimError(Exception):
    """Base class for all engine errors.

    Attributes:
        code: Machine-readable error code.
        message: Human-readable description.
    """

    code: str = "NIM_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"message": self.message, "code": self.code}


class InvalidConfiguration(NimError):
    """Malformed game-creation parameters or settings."""

    code = "INVALID_CONFIGURATION"

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict[str, str]:
        payload = super().to_dict()
        payload["field"] = self.field
        return payload


class UnknownStrategy(InvalidConfiguration):
    code = "UNKNOWN_STRATEGY"

    def __init__(self, strategy: str) -> None:
        super().__init__("strategy", f"Strategy {strategy} is not a valid strategy")
        self.strategy = strategy


class IllegalMove(NimError):
    """A move that breaks the rules of the game."""

    code = "ILLEGAL_MOVE"


class NotFound(NimError):
    code = "NOT_FOUND"
