"""YAML configuration loader for the cni config agent."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Sequence

import yaml

from cni_conf_template.config import DEFAULT_CONF_DIR, ReconcilerConfig


@dataclass
class CNIConfig:
    conf_dir: Path = DEFAULT_CONF_DIR
    conf_template: str = ""
    max_conf_num: int = 1

    def to_reconciler_config(self) -> ReconcilerConfig:
        return ReconcilerConfig(
            conf_template=self.conf_template,
            conf_dir=self.conf_dir,
            max_conf_num=self.max_conf_num,
        )


@dataclass
class WatcherConfig:
    type: str
    path: Path
    interval: float = 5.0


@dataclass
class AgentConfig:
    cni: CNIConfig
    watchers: Sequence[WatcherConfig] = field(default_factory=list)


def _parse_cni(section: dict) -> CNIConfig:
    if not isinstance(section, dict):
        raise ValueError("'cni' section must be a mapping")
    max_conf_num = int(section.get("max_conf_num", 1))
    if max_conf_num < 1:
        raise ValueError("'max_conf_num' must be at least 1")
    return CNIConfig(
        conf_dir=Path(section.get("conf_dir", DEFAULT_CONF_DIR)),
        conf_template=str(section.get("conf_template") or ""),
        max_conf_num=max_conf_num,
    )


def _parse_watchers(entries: Iterable[dict]) -> List[WatcherConfig]:
    watchers: List[WatcherConfig] = []
    for entry in entries:
        if "path" not in entry:
            raise ValueError("watcher entry missing 'path'")
        watchers.append(
            WatcherConfig(
                type=str(entry.get("type", "file")),
                path=Path(entry["path"]),
                interval=float(entry.get("interval", 5.0)),
            )
        )
    return watchers


def load_config(path: Path) -> AgentConfig:
    data = yaml.safe_load(path.read_text())
    if not isinstance(data, dict):
        raise ValueError("Agent configuration must be a mapping")

    cni_section = data.get("cni")
    if cni_section is None:
        raise ValueError("Configuration missing 'cni' section")
    cni = _parse_cni(cni_section)

    watchers_section = data.get("watchers", [])
    if not isinstance(watchers_section, list):
        raise ValueError("'watchers' section must be a list")
    watchers = _parse_watchers(watchers_section)

    return AgentConfig(cni=cni, watchers=watchers)
