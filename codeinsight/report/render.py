"""Markdown rendering for synthesized reports."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

from jinja2 import Environment, FileSystemLoader

from ..models import DeepReport, DiscoveryReport, SynthesizedReport

_REPORT_TEMPLATE = "report.md.j2"


class ReportRenderer:
    """Renders reports through Jinja2 templates.

    A caller-supplied ``templates_dir`` is searched before the bundled
    templates, so a single ``report.md.j2`` there overrides the default.
    """

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir
        self._env = self._create_env(templates_dir)

    def render_markdown(self, report: SynthesizedReport | DeepReport | DiscoveryReport) -> str:
        template = self._env.get_template(_REPORT_TEMPLATE)
        return template.render(**_context(report)).strip() + "\n"

    @staticmethod
    def render_json(data: Any) -> str:
        payload = data.to_dict() if hasattr(data, "to_dict") else data
        return json.dumps(payload, indent=2, sort_keys=True)

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories: List[str] = []
        if templates_dir:
            directories.append(str(templates_dir))
        directories.append(str(Path(__file__).with_name("templates")))
        loader = FileSystemLoader(directories)
        env = Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)
        env.filters["pct"] = _percent
        return env


def _context(report: SynthesizedReport | DeepReport | DiscoveryReport) -> Dict[str, Any]:
    deep = report.deep if isinstance(report, DiscoveryReport) else report
    base = deep.report if isinstance(deep, DeepReport) else deep
    data = base.to_dict()
    context: Dict[str, Any] = {
        "report": data,
        "analysis": data["analysis"],
        "deep": None,
        "discovery": None,
    }
    if isinstance(deep, DeepReport):
        context["deep"] = deep.to_dict()["deep_analysis"]
    if isinstance(report, DiscoveryReport):
        discovery = report.to_dict()
        context["discovery"] = {
            "correlations": discovery["correlations"],
            "recommendations": discovery["enhanced_recommendations"],
            "common_ground": discovery["common_ground"],
        }
    return context


def _percent(value: Any) -> str:
    try:
        return f"{float(value) * 100:.0f}%"
    except (TypeError, ValueError):
        return "n/a"


__all__ = ["ReportRenderer"]
