"""Data structures exchanged with the config reconciler.

The request/response types follow the shape of the CRI
``UpdateRuntimeConfig`` call so the reconciler can be fed either by an
in-process caller or by a JSON payload dropped on disk by the node agent.
Only the pod CIDR is interpreted today.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping

# Name of the cni config file generated from the template.
CNI_CONFIG_FILE_NAME = "10-containerd-net.conflist"

DEFAULT_CONF_DIR = Path("/etc/cni/net.d")


@dataclass(frozen=True)
class NetworkConfig:
    pod_cidr: str = ""


@dataclass(frozen=True)
class RuntimeConfig:
    network_config: NetworkConfig = field(default_factory=NetworkConfig)


@dataclass(frozen=True)
class UpdateRuntimeConfigRequest:
    """Request carrying the runtime config pushed by the control plane."""

    runtime_config: RuntimeConfig = field(default_factory=RuntimeConfig)

    @property
    def pod_cidr(self) -> str:
        return self.runtime_config.network_config.pod_cidr

    @classmethod
    def for_pod_cidr(cls, pod_cidr: str) -> "UpdateRuntimeConfigRequest":
        return cls(RuntimeConfig(NetworkConfig(pod_cidr=pod_cidr)))

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "UpdateRuntimeConfigRequest":
        """Build a request from the CRI JSON shape.

        ``{"runtimeConfig": {"networkConfig": {"podCidr": "10.244.1.0/24"}}}``

        Missing levels are treated as an empty pod CIDR, mirroring the nil-safe
        getters of the CRI API.  The CIDR value itself is not validated.
        """

        if not isinstance(payload, Mapping):
            raise ValueError("runtime config payload must be a mapping")
        runtime = payload.get("runtimeConfig") or {}
        if not isinstance(runtime, Mapping):
            raise ValueError("'runtimeConfig' must be a mapping")
        network = runtime.get("networkConfig") or {}
        if not isinstance(network, Mapping):
            raise ValueError("'networkConfig' must be a mapping")
        pod_cidr = network.get("podCidr") or ""
        return cls.for_pod_cidr(str(pod_cidr))


@dataclass(frozen=True)
class UpdateRuntimeConfigResponse:
    """Empty success marker."""


# Short aliases used throughout the package.
UpdateRequest = UpdateRuntimeConfigRequest
UpdateResponse = UpdateRuntimeConfigResponse


@dataclass(frozen=True)
class ReconcilerConfig:
    """Static reconciler settings.

    Attributes
    ----------
    conf_template:
        Path of the cni config template.  An empty string disables template
        generation entirely; some other component is then expected to drop
        the cni config.
    conf_dir:
        Directory the generated config is written to.  It is also the
        directory the network plugin loads its configuration from.
    max_conf_num:
        Maximum number of network configs the plugin loads from ``conf_dir``.
    """

    conf_template: str = ""
    conf_dir: Path = DEFAULT_CONF_DIR
    max_conf_num: int = 1

    @property
    def output_path(self) -> Path:
        return Path(self.conf_dir) / CNI_CONFIG_FILE_NAME


@dataclass(frozen=True)
class RenderContext:
    """Values substituted into the cni config template."""

    pod_cidr: str

    def as_template_vars(self) -> Dict[str, str]:
        return {"PodCIDR": self.pod_cidr}
