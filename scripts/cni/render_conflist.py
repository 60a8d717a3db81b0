#!/usr/bin/env python3
"""Preview a cni config template rendered for a pod CIDR."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from cni_conf_template import ReconcileError, RenderContext, TemplateRenderer  # noqa: E402


LOG = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--template",
        type=Path,
        default=Path("deploy/cni/containerd-net.conflist.j2"),
        help="Path to the cni config template",
    )
    parser.add_argument(
        "--pod-cidr",
        default="10.244.0.0/24",
        help="Pod CIDR substituted into the template",
    )
    parser.add_argument(
        "--check-json",
        action="store_true",
        help="Fail if the rendered output is not valid JSON",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    logging.basicConfig(level=logging.INFO)

    try:
        template = TemplateRenderer().parse(args.template)
        rendered = template.render_string(RenderContext(args.pod_cidr))
    except ReconcileError as exc:
        LOG.error("%s", exc)
        return 1

    if args.check_json:
        try:
            json.loads(rendered)
        except json.JSONDecodeError as exc:
            LOG.error("Rendered config is not valid JSON: %s", exc)
            return 1

    sys.stdout.write(rendered)
    return 0


if __name__ == "__main__":
    sys.exit(main())
