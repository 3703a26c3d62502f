"""Errores del nucleo de conteo de pasos."""

from __future__ import annotations


class StepsyError(Exception):
    """Base class for every error raised by stepsy."""


class StorageFault(StepsyError):
    """The daily store failed to read or write (disk full, corruption, ...)."""


class NotFound(StepsyError, LookupError):
    """Requested entry or session does not exist."""


class InvalidArgument(StepsyError, ValueError):
    """Argument rejected before touching any state."""
