from pathlib import Path

import pytest

from cni_conf_agent.config import load_config


def test_load_config(tmp_path: Path):
    config_path = tmp_path / "agent.yaml"
    config_path.write_text(
        """
cni:
  conf_dir: /var/lib/cni/net.d
  conf_template: /etc/cni-conf-agent/containerd-net.conflist.j2
  max_conf_num: 2
watchers:
  - type: file
    path: /run/cni-conf-agent/runtime-config.json
    interval: 2
"""
    )

    cfg = load_config(config_path)

    assert cfg.cni.conf_dir == Path("/var/lib/cni/net.d")
    assert cfg.cni.conf_template == "/etc/cni-conf-agent/containerd-net.conflist.j2"
    assert cfg.cni.max_conf_num == 2
    reconciler_cfg = cfg.cni.to_reconciler_config()
    assert reconciler_cfg.output_path == Path("/var/lib/cni/net.d/10-containerd-net.conflist")
    assert len(cfg.watchers) == 1
    watcher = cfg.watchers[0]
    assert watcher.type == "file"
    assert watcher.path == Path("/run/cni-conf-agent/runtime-config.json")
    assert watcher.interval == pytest.approx(2.0)


def test_load_config_defaults(tmp_path: Path):
    config_path = tmp_path / "agent.yaml"
    config_path.write_text("cni: {}\n")

    cfg = load_config(config_path)

    assert cfg.cni.conf_dir == Path("/etc/cni/net.d")
    assert cfg.cni.conf_template == ""
    assert cfg.watchers == []


@pytest.mark.parametrize(
    "content",
    [
        "- not a mapping\n",
        "watchers: []\n",
        "cni: {}\nwatchers: {}\n",
        "cni: {max_conf_num: 0}\n",
    ],
)
def test_load_config_rejects_invalid_documents(tmp_path: Path, content: str):
    config_path = tmp_path / "agent.yaml"
    config_path.write_text(content)

    with pytest.raises(ValueError):
        load_config(config_path)
