"""Outcome events emitted once per reconciliation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional


class ReconcileOutcome(Enum):
    NO_POD_CIDR = "no-pod-cidr"
    NO_TEMPLATE = "no-template"
    PLUGIN_READY = "plugin-ready"
    CONFIG_LOADED = "config-loaded"
    GENERATED = "generated"
    FAILED = "failed"

    @property
    def skipped(self) -> bool:
        return self not in (ReconcileOutcome.GENERATED, ReconcileOutcome.FAILED)


@dataclass(frozen=True)
class ReconcileEvent:
    """What a reconciliation did.

    ``path`` is the generated config file for ``GENERATED``, the failing
    resource for ``FAILED`` and the template (if any) otherwise.
    """

    outcome: ReconcileOutcome
    pod_cidr: str
    path: Optional[str] = None
    error: Optional[Exception] = None


ReconcileListener = Callable[[ReconcileEvent], None]
