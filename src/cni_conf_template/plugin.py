"""Network plugin collaborators consulted before generating a config.

The reconciler only needs two answers from the network plugin: whether it is
ready, and whether a usable configuration can already be loaded from disk.
Both are expressed as abstract interfaces so the reconciler can be driven by
the real plugin or by test doubles.  :class:`CNINetworkPlugin` implements
them on top of a cni config directory, following the loading rules of the
reference ``go-cni`` library.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import PluginConfigLoadError, PluginNotReadyError

LOG = logging.getLogger(__name__)

CONF_EXTENSIONS = (".conf", ".conflist", ".json")

LOOPBACK_NETWORK: Dict[str, Any] = {
    "cniVersion": "0.3.1",
    "name": "cni-loopback",
    "plugins": [{"type": "loopback"}],
}


class PluginStatusProbe(ABC):
    @abstractmethod
    def status(self) -> None:
        """Return if the plugin is ready, raise :class:`PluginError` otherwise."""


class PluginConfigLoader(ABC):
    @abstractmethod
    def load(self, *, include_loopback: bool, include_default: bool) -> None:
        """Load on-disk configuration, raise :class:`PluginError` on failure."""


class CNINetworkPlugin(PluginStatusProbe, PluginConfigLoader):
    """Track the networks a cni plugin would load from ``conf_dir``.

    Parameters
    ----------
    conf_dir:
        Directory scanned for ``.conf``, ``.conflist`` and ``.json`` files.
    max_conf_num:
        Upper bound on the number of default networks loaded.  Files are
        considered in lexicographic order, as the cni runtime does.
    """

    def __init__(self, conf_dir: Path, max_conf_num: int = 1) -> None:
        self._conf_dir = Path(conf_dir)
        self._max_conf_num = max_conf_num
        self._loopback: Optional[Dict[str, Any]] = None
        self._networks: List[Dict[str, Any]] = []

    @property
    def networks(self) -> List[Dict[str, Any]]:
        loaded = [self._loopback] if self._loopback else []
        return loaded + list(self._networks)

    def status(self) -> None:
        if not self._networks:
            raise PluginNotReadyError("cni plugin not initialized")

    def load(self, *, include_loopback: bool = True, include_default: bool = True) -> None:
        # Drop what an earlier load found; a failed load leaves nothing behind.
        self._loopback = None
        self._networks = []

        networks: List[Dict[str, Any]] = []
        if include_default:
            networks = self._load_default_networks()
        self._loopback = dict(LOOPBACK_NETWORK) if include_loopback else None
        self._networks = networks
        LOG.debug(
            "Loaded %d cni network(s) from %s (loopback=%s)",
            len(networks),
            self._conf_dir,
            include_loopback,
        )

    def _load_default_networks(self) -> List[Dict[str, Any]]:
        if not self._conf_dir.is_dir():
            raise PluginConfigLoadError(f"no network config found in {self._conf_dir}")

        try:
            entries = sorted(self._conf_dir.iterdir())
        except OSError as exc:
            raise PluginConfigLoadError(
                f"failed to list network configs in {self._conf_dir}: {exc}"
            ) from exc

        networks: List[Dict[str, Any]] = []
        for path in entries:
            if len(networks) >= self._max_conf_num:
                break
            if not path.is_file() or path.suffix not in CONF_EXTENSIONS:
                continue
            network = self._read_network(path)
            if network is not None:
                networks.append(network)

        if not networks:
            raise PluginConfigLoadError(f"no network config found in {self._conf_dir}")
        return networks

    def _read_network(self, path: Path) -> Optional[Dict[str, Any]]:
        try:
            data = json.loads(path.read_text())
        except (OSError, ValueError) as exc:
            LOG.warning("Ignoring unreadable cni config %s: %s", path, exc)
            return None
        if not isinstance(data, dict):
            LOG.warning("Ignoring cni config %s: not a JSON object", path)
            return None

        if path.suffix == ".conflist":
            if not data.get("plugins"):
                LOG.warning("Ignoring cni config list %s: no plugins", path)
                return None
            return data

        # A single plugin config is wrapped into a list like libcni does.
        if not data.get("type"):
            LOG.warning("Ignoring cni config %s: missing plugin type", path)
            return None
        return {
            "cniVersion": data.get("cniVersion", ""),
            "name": data.get("name", ""),
            "plugins": [data],
        }
