"""Exception types raised by the tag vault core."""

from __future__ import annotations


class TagVaultError(Exception):
    """Base class for failures surfaced by the tag engine."""


class InvalidTagError(TagVaultError, ValueError):
    """A caller supplied a string that is not a well-formed tag."""

    def __init__(self, tag: str) -> None:
        self.tag = tag
        super().__init__(
            f"'{tag}' is not a valid tag. Tags are '#' followed by letters, digits or '-' "
            "(for example '#project-a')."
        )


class DocumentReadError(TagVaultError):
    """A vault document could not be read."""

    def __init__(self, path: str, reason: object) -> None:
        self.path = path
        super().__init__(f"Could not read '{path}': {reason}")


class DocumentWriteError(TagVaultError):
    """A vault document could not be rewritten."""

    def __init__(self, path: str, reason: object) -> None:
        self.path = path
        super().__init__(f"Could not write '{path}': {reason}")
