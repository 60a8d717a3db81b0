"""Generate the cni config from a template when a pod CIDR is assigned.

When the control plane assigns a pod CIDR to the node, the runtime receives
an ``UpdateRuntimeConfig`` call.  If an operator configured a cni config
template and the network plugin has nothing usable yet, the template is
rendered with the pod CIDR into ``<conf_dir>/10-containerd-net.conflist``.

Every call re-reads the plugin state through the injected collaborators; the
reconciler itself keeps no state between calls.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from threading import Lock
from typing import Dict, Optional, Tuple

from .config import (
    CNI_CONFIG_FILE_NAME,
    ReconcilerConfig,
    RenderContext,
    UpdateRuntimeConfigRequest,
    UpdateRuntimeConfigResponse,
)
from .errors import (
    DirectoryError,
    FileOpenError,
    RenderError,
)
from .events import ReconcileEvent, ReconcileListener, ReconcileOutcome
from .plugin import PluginConfigLoader, PluginStatusProbe
from .template import TemplateRenderer

LOG = logging.getLogger(__name__)

CONF_DIR_MODE = 0o755
CONF_FILE_MODE = 0o644

_DIR_LOCKS: Dict[str, Lock] = {}
_DIR_LOCKS_GUARD = Lock()


def _directory_lock(conf_dir: Path) -> Lock:
    """Return the process wide lock serialising writes into ``conf_dir``."""

    key = os.path.abspath(conf_dir)
    with _DIR_LOCKS_GUARD:
        return _DIR_LOCKS.setdefault(key, Lock())


def _conf_file_opener(path: str, flags: int) -> int:
    return os.open(path, flags, CONF_FILE_MODE)


class ConfigReconciler:
    """Decide whether a cni config must be generated and write it if so."""

    def __init__(
        self,
        config: ReconcilerConfig,
        plugin_status: PluginStatusProbe,
        config_loader: PluginConfigLoader,
        renderer: Optional[TemplateRenderer] = None,
        listener: Optional[ReconcileListener] = None,
    ) -> None:
        self._config = config
        self._plugin_status = plugin_status
        self._config_loader = config_loader
        self._renderer = renderer or TemplateRenderer()
        self._listener = listener

    @property
    def config(self) -> ReconcilerConfig:
        return self._config

    def reconcile(
        self, request: UpdateRuntimeConfigRequest
    ) -> UpdateRuntimeConfigResponse:
        pod_cidr = request.pod_cidr
        try:
            outcome, path = self._reconcile(pod_cidr)
        except Exception as exc:
            self._emit(
                ReconcileEvent(
                    ReconcileOutcome.FAILED,
                    pod_cidr,
                    path=getattr(exc, "path", None),
                    error=exc,
                )
            )
            raise
        self._emit(ReconcileEvent(outcome, pod_cidr, path=path))
        return UpdateRuntimeConfigResponse()

    # Name of the CRI call this reconciler backs.
    update_runtime_config = reconcile

    def _reconcile(self, pod_cidr: str) -> Tuple[ReconcileOutcome, Optional[str]]:
        if not pod_cidr:
            LOG.debug("No pod CIDR in runtime config update, nothing to do")
            return ReconcileOutcome.NO_POD_CIDR, None

        conf_template = self._config.conf_template
        if not conf_template:
            LOG.info(
                "No cni config template is specified, wait for other system "
                "components to drop the config."
            )
            return ReconcileOutcome.NO_TEMPLATE, None

        # Any error from the probe or the loader means "not usable yet".
        try:
            self._plugin_status.status()
        except Exception as exc:
            LOG.debug("Network plugin is not ready: %s", exc)
        else:
            LOG.info(
                "Network plugin is ready, skip generating cni config from template %r",
                conf_template,
            )
            return ReconcileOutcome.PLUGIN_READY, conf_template

        try:
            self._config_loader.load(include_loopback=True, include_default=True)
        except Exception as exc:
            LOG.debug("Failed to load existing cni config: %s", exc)
        else:
            LOG.info(
                "CNI config is successfully loaded, skip generating cni config "
                "from template %r",
                conf_template,
            )
            return ReconcileOutcome.CONFIG_LOADED, conf_template

        LOG.info("Generating cni config from template %r", conf_template)
        conf_file = self._generate(conf_template, pod_cidr)
        LOG.info("Wrote cni config %s for pod CIDR %s", conf_file, pod_cidr)
        return ReconcileOutcome.GENERATED, str(conf_file)

    def _generate(self, conf_template: str, pod_cidr: str) -> Path:
        template = self._renderer.parse(conf_template)

        conf_dir = Path(self._config.conf_dir)
        conf_file = conf_dir / CNI_CONFIG_FILE_NAME
        with _directory_lock(conf_dir):
            try:
                conf_dir.mkdir(mode=CONF_DIR_MODE, parents=True, exist_ok=True)
            except OSError as exc:
                raise DirectoryError(conf_dir, exc) from exc

            # Truncate so a shorter render never leaves bytes of the previous one.
            try:
                handle = open(conf_file, "w", opener=_conf_file_opener)
            except OSError as exc:
                raise FileOpenError(conf_file, exc) from exc

            try:
                with handle:
                    template.execute(handle, RenderContext(pod_cidr))
            except RenderError as exc:
                cause = exc.cause if exc.cause is not None else exc
                raise RenderError(conf_file, cause) from exc
            except OSError as exc:
                raise RenderError(conf_file, exc) from exc
        return conf_file

    def _emit(self, event: ReconcileEvent) -> None:
        if self._listener is not None:
            self._listener(event)
