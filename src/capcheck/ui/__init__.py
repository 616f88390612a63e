"""Console rendering for capability reports."""

from .dashboard import render_fallback, render_report, run_interactive

__all__ = ["render_fallback", "render_report", "run_interactive"]
