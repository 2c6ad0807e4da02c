"""Exceptions raised by the map generator."""


class MapGenError(Exception):
    """Base exception for map generation."""


class TemplateError(MapGenError):
    """Raised when a map template is malformed or cannot produce any cell."""


class TemplateNotFound(TemplateError):
    """Raised when a named template directory does not exist."""


class GenerationError(MapGenError):
    """Random-dependent failure; the pipeline retries these with a fresh seed."""


class StartPointUncovered(GenerationError):
    """Raised when the start or end point landed in a packing gap."""


class UnreachableEndError(GenerationError):
    """Raised when the end cell cannot be reached from the start cell."""


class GenerationFailed(MapGenError):
    """Raised once every retry attempt failed."""

    def __init__(self, message: str, attempts: int):
        super().__init__(message)
        self.attempts = attempts


class NotAdjacentError(MapGenError, RuntimeError):
    """Raised when a door is requested between two cells that share no wall."""
