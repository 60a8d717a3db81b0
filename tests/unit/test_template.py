import io
from pathlib import Path

import pytest

from cni_conf_template import RenderContext, RenderError, TemplateParseError, TemplateRenderer


def test_renderer_substitutes_pod_cidr(tmp_path: Path):
    path = tmp_path / "cni.tmpl"
    path.write_text('{"subnet": "{{ PodCIDR }}"}\n')

    template = TemplateRenderer().parse(path)
    out = io.StringIO()
    template.execute(out, RenderContext("10.244.1.0/24"))

    assert out.getvalue() == '{"subnet": "10.244.1.0/24"}\n'
    assert template.name == str(path)


def test_renderer_leaves_json_untouched(tmp_path: Path):
    path = tmp_path / "cni.tmpl"
    path.write_text('{"a": {"b": [1, 2]}, "quote": "<&>"}')

    rendered = TemplateRenderer().parse(path).render_string(RenderContext("10.0.0.0/8"))

    assert rendered == '{"a": {"b": [1, 2]}, "quote": "<&>"}'


def test_renderer_rejects_unknown_fields(tmp_path: Path):
    path = tmp_path / "cni.tmpl"
    path.write_text("{{ ServiceCIDR }}")

    template = TemplateRenderer().parse(path)

    with pytest.raises(RenderError) as excinfo:
        template.execute(io.StringIO(), RenderContext("10.244.1.0/24"))
    assert excinfo.value.path == str(path)


def test_renderer_reports_syntax_errors(tmp_path: Path):
    path = tmp_path / "cni.tmpl"
    path.write_text("{% if %}")

    with pytest.raises(TemplateParseError) as excinfo:
        TemplateRenderer().parse(path)
    assert "failed to parse cni config template" in str(excinfo.value)
