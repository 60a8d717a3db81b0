"""Entry point for the standalone cni config agent."""

from __future__ import annotations

import argparse
import logging
import signal
import sys
from pathlib import Path
from threading import Event
from typing import List

from cni_conf_template import CNINetworkPlugin, ConfigReconciler, ReconcileError
from cni_conf_template.config import UpdateRuntimeConfigRequest
from cni_conf_template.events import ReconcileEvent

from .config import AgentConfig, load_config
from .watchers import FileRuntimeConfigWatcher

LOG = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )


def _log_event(event: ReconcileEvent) -> None:
    if event.outcome.skipped:
        LOG.debug("reconcile skipped (%s) for pod CIDR %r", event.outcome.value, event.pod_cidr)
    else:
        LOG.debug("reconcile %s for pod CIDR %r (%s)", event.outcome.value, event.pod_cidr, event.path)


def build_reconciler(config: AgentConfig) -> ConfigReconciler:
    reconciler_config = config.cni.to_reconciler_config()
    plugin = CNINetworkPlugin(
        reconciler_config.conf_dir, max_conf_num=reconciler_config.max_conf_num
    )
    return ConfigReconciler(
        reconciler_config,
        plugin_status=plugin,
        config_loader=plugin,
        listener=_log_event,
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run the cni config agent")
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("/etc/cni-conf-agent/agent.yaml"),
        help="Path to the agent configuration file",
    )
    parser.add_argument(
        "--pod-cidr",
        help="Reconcile once for this pod CIDR and exit",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    config = load_config(args.config)
    reconciler = build_reconciler(config)

    if args.pod_cidr is not None:
        request = UpdateRuntimeConfigRequest.for_pod_cidr(args.pod_cidr)
        try:
            reconciler.update_runtime_config(request)
        except ReconcileError as exc:
            LOG.error("%s", exc)
            return 1
        return 0

    stop_event = Event()
    watchers = build_watchers(config, reconciler, stop_event)
    _run_watchers(watchers, stop_event)

    LOG.info("cni config agent stopped")
    return 0


def build_watchers(
    config: AgentConfig, reconciler: ConfigReconciler, stop_event: Event
) -> List[FileRuntimeConfigWatcher]:
    watchers = []
    for watcher_cfg in config.watchers:
        if watcher_cfg.type != "file":
            raise ValueError(f"unsupported watcher type '{watcher_cfg.type}'")
        watchers.append(
            FileRuntimeConfigWatcher(
                reconciler=reconciler,
                path=watcher_cfg.path,
                interval=watcher_cfg.interval,
                stop_event=stop_event,
            )
        )
    return watchers


def _run_watchers(
    watchers: List[FileRuntimeConfigWatcher], stop_event: Event
) -> None:  # pragma: no cover - blocks until a signal arrives
    if not watchers:
        LOG.warning("no watchers configured; agent will idle")

    for watcher in watchers:
        # React to an already assigned pod CIDR before the first interval.
        try:
            watcher.poll()
        except Exception:
            LOG.exception("initial poll failed for runtime config watcher")
        watcher.start()

    def _shutdown(signum, frame):
        LOG.info("received signal %s, shutting down", signum)
        stop_event.set()

    signal.signal(signal.SIGINT, _shutdown)
    signal.signal(signal.SIGTERM, _shutdown)

    try:
        while not stop_event.is_set():
            stop_event.wait(1.0)
    except KeyboardInterrupt:
        stop_event.set()

    for watcher in watchers:
        watcher.join()


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
