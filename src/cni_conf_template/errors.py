"""Exceptions raised by the cni config reconciler and its collaborators."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    TEMPLATE_PARSE = "failed to parse cni config template"
    DIRECTORY = "failed to create cni config directory"
    FILE_OPEN = "failed to open cni config file"
    RENDER = "failed to generate cni config file"
    UNKNOWN = "failed to update runtime config"


class ReconcileError(Exception):
    """Terminal failure of a single reconciliation.

    Callers can inspect :attr:`kind`, :attr:`path` and :attr:`cause` instead
    of matching on the message.
    """

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, path, cause: Optional[BaseException] = None) -> None:
        self.path = str(path)
        self.cause = cause
        super().__init__(self._format())

    def _format(self) -> str:
        message = f"{self.kind.value} {self.path!r}"
        if self.cause is not None:
            message = f"{message}: {self.cause}"
        return message


class TemplateParseError(ReconcileError):
    kind = ErrorKind.TEMPLATE_PARSE


class DirectoryError(ReconcileError):
    kind = ErrorKind.DIRECTORY


class FileOpenError(ReconcileError):
    kind = ErrorKind.FILE_OPEN


class RenderError(ReconcileError):
    kind = ErrorKind.RENDER


class PluginError(RuntimeError):
    """Raised by network plugin collaborators to report a negative answer."""


class PluginNotReadyError(PluginError):
    pass


class PluginConfigLoadError(PluginError):
    pass
