"""Rendering package producing finished SVG pages."""

from .page_renderer import Renderer, render_report

__all__ = ["Renderer", "render_report"]
