# splendor_engine/errors.py

"""
Exception types raised by the engine.

All of them are ValueErrors: each one means the single call that raised
it was rejected before any state changed.
"""


class SplendorError(ValueError):
    """Base class for every engine error."""


class SetupError(SplendorError):
    """Bad setup options (player count, names, AI flags)."""


class InvalidActionError(SplendorError):
    """A turn action failed validation."""

    def __init__(self, reason: str, action=None):
        super().__init__(reason)
        self.reason = reason
        self.action = action


class InvalidDiscardError(SplendorError):
    """A discard had the wrong total or drew more tokens than the player holds."""


class NoLegalActionError(SplendorError):
    """A strategy was asked to act with no legal action available."""
