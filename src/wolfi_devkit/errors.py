"""Base exceptions for wolfi-devkit."""


class WolfiDevkitError(Exception):
    """Base error for all wolfi-devkit failures."""

    pass


class MissingInputError(WolfiDevkitError):
    """A required argument or environment value was not provided."""

    pass
