"""Report rendering helpers."""

from .render import ReportRenderer

__all__ = ["ReportRenderer"]
