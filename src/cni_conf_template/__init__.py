"""cni config generation from a template.

When a pod CIDR is assigned to a node the container runtime is told through
an ``UpdateRuntimeConfig`` call.  If no network plugin configuration exists
yet, the runtime can bootstrap one from an operator supplied template.  This
package holds that logic, decoupled from the runtime so it can be exercised
in unit tests without a cni installation:

* :class:`ConfigReconciler` decides whether a config must be generated and
  writes ``10-containerd-net.conflist`` if so;
* :class:`CNINetworkPlugin` answers the readiness / loadability questions
  from a cni config directory;
* :class:`TemplateRenderer` parses and renders Jinja2 templates.
"""

from .config import (  # noqa: F401
    CNI_CONFIG_FILE_NAME,
    ReconcilerConfig,
    RenderContext,
    UpdateRuntimeConfigRequest,
    UpdateRuntimeConfigResponse,
)
from .errors import (  # noqa: F401
    DirectoryError,
    FileOpenError,
    ReconcileError,
    RenderError,
    TemplateParseError,
)
from .events import ReconcileEvent, ReconcileOutcome  # noqa: F401
from .plugin import CNINetworkPlugin  # noqa: F401
from .reconciler import ConfigReconciler  # noqa: F401
from .template import TemplateRenderer  # noqa: F401

__all__ = [
    "CNI_CONFIG_FILE_NAME",
    "CNINetworkPlugin",
    "ConfigReconciler",
    "DirectoryError",
    "FileOpenError",
    "ReconcileError",
    "ReconcileEvent",
    "ReconcileOutcome",
    "ReconcilerConfig",
    "RenderContext",
    "RenderError",
    "TemplateParseError",
    "TemplateRenderer",
    "UpdateRuntimeConfigRequest",
    "UpdateRuntimeConfigResponse",
]
