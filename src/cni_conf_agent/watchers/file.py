"""File-based runtime config watcher."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from threading import Event, Thread
from typing import Optional

from cni_conf_template import ConfigReconciler, ReconcileError
from cni_conf_template.config import UpdateRuntimeConfigRequest

LOG = logging.getLogger(__name__)


class FileRuntimeConfigWatcher(Thread):
    """Poll a JSON runtime config file and reconcile on pod CIDR changes.

    The file uses the CRI message shape::

        {"runtimeConfig": {"networkConfig": {"podCidr": "10.244.1.0/24"}}}

    A failed reconciliation is not remembered, so the next poll runs the whole
    operation again.
    """

    def __init__(
        self,
        reconciler: ConfigReconciler,
        path: Path,
        interval: float,
        stop_event: Event,
    ) -> None:
        super().__init__(daemon=True)
        self._reconciler = reconciler
        self._path = Path(path)
        self._interval = interval
        self._stop_event = stop_event
        self._pod_cidr: Optional[str] = None

    @property
    def pod_cidr(self) -> Optional[str]:
        return self._pod_cidr

    def run(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.poll()
            except Exception:  # pragma: no cover - logged below
                LOG.exception("runtime config watcher encountered an error")
            self._stop_event.wait(self._interval)

    def poll(self) -> None:
        if not self._path.exists():
            LOG.debug("runtime config file %s does not exist yet", self._path)
            return

        try:
            payload = json.loads(self._path.read_text())
        except json.JSONDecodeError as exc:
            LOG.warning("failed to parse runtime config file %s: %s", self._path, exc)
            return

        try:
            request = UpdateRuntimeConfigRequest.from_dict(payload)
        except ValueError as exc:
            LOG.warning("invalid runtime config file %s: %s", self._path, exc)
            return

        if request.pod_cidr == self._pod_cidr:
            return

        LOG.debug("pod CIDR changed from %s to %s", self._pod_cidr, request.pod_cidr)
        try:
            self._reconciler.update_runtime_config(request)
        except ReconcileError as exc:
            LOG.error("failed to update runtime config from %s: %s", self._path, exc)
            return
        self._pod_cidr = request.pod_cidr
