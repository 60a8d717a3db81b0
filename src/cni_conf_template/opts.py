"""oslo.config options for agents embedding the cni config reconciler.

Agents built on oslo.config register these options and build the
:class:`ReconcilerConfig` from the parsed configuration, e.g.::

    [cni]
    conf_dir = /etc/cni/net.d
    conf_template = /etc/containerd/cni-conf.tmpl
"""

from pathlib import Path

from oslo_config import cfg

from .config import DEFAULT_CONF_DIR, ReconcilerConfig

CNI_GROUP = "cni"

cni_opts = [
    cfg.StrOpt('conf_dir',
               default=str(DEFAULT_CONF_DIR),
               help='Directory holding the cni network configuration. The '
                    'config generated from the template is written here.'),
    cfg.StrOpt('conf_template',
               default='',
               help='Path of the cni config template rendered with the pod '
                    'CIDR of the node. Leave empty when another component '
                    'drops the cni config.'),
    cfg.IntOpt('max_conf_num',
               default=1,
               min=1,
               help='Maximum number of network configs loaded from conf_dir.'),
]


def register_cni_opts(conf=cfg.CONF):
    """Register the cni options in the ``[cni]`` group of ``conf``."""
    conf.register_opts(cni_opts, group=CNI_GROUP)


def reconciler_config_from_conf(conf=cfg.CONF):
    group = getattr(conf, CNI_GROUP)
    return ReconcilerConfig(
        conf_template=group.conf_template or '',
        conf_dir=Path(group.conf_dir),
        max_conf_num=group.max_conf_num,
    )


def list_opts():
    """Entry point for oslo-config-generator."""
    return [(CNI_GROUP, cni_opts)]
