"""Watcher implementations used by the cni config agent."""

from .file import FileRuntimeConfigWatcher  # noqa: F401

__all__ = ["FileRuntimeConfigWatcher"]
