"""
Console report for text analysis results.

Renders an :class:`SvgTextAnalysis` as rich tables: statistics, warnings,
the element list in reading order and suggested ids for unnamed elements.
"""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from ..models.text_element import SvgTextAnalysis

CONTENT_PREVIEW = 30


def _preview(content: str, limit: int = CONTENT_PREVIEW) -> str:
    if len(content) > limit:
        return content[: limit - 3] + "..."
    return content


def build_elements_table(analysis: SvgTextAnalysis) -> Table:
    table = Table(title="Text Elements (top-to-bottom)")
    table.add_column("#", justify="right")
    table.add_column("ID", style="cyan")
    table.add_column("X", justify="right")
    table.add_column("Y", justify="right")
    table.add_column("Font", justify="right")
    table.add_column("Content", style="magenta")

    for index, element in enumerate(analysis.text_elements, start=1):
        table.add_row(
            str(index),
            escape(element.id) if element.id else Text("[missing]", style="red"),
            f"{element.x:.1f}",
            f"{element.y:.1f}",
            f"{element.font_size:.1f}" if element.font_size else "N/A",
            escape(_preview(element.content)),
        )
    return table


def build_statistics_table(analysis: SvgTextAnalysis) -> Table:
    stats = analysis.statistics
    table = Table(title="Statistics")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="magenta")
    table.add_row("Total text elements", str(stats.total))
    table.add_row("With ID", str(stats.with_id))
    table.add_row("Without ID", str(stats.without_id))
    if stats.average_font_size:
        table.add_row("Average font size", f"{stats.average_font_size:.1f}px")
    if stats.path_text > 0:
        table.add_row("Path-based text", f"[yellow]{stats.path_text}[/yellow]")
    return table


def print_text_report(analysis: SvgTextAnalysis, console: Optional[Console] = None) -> None:
    """Print the analysis of one page to ``console`` (stdout by default)."""
    console = console or Console()
    size = analysis.page_size
    title = f"Text Elements Analysis: {escape(analysis.name or 'svg')}"
    console.print(Panel(f"Page Size: {size.width:.1f}x{size.height:.1f} {size.unit}", title=title, style="blue"))
    console.print(build_statistics_table(analysis))

    for warning in analysis.warnings:
        console.print(f"[yellow]⚠ {escape(warning)}[/yellow]")

    console.print(build_elements_table(analysis))

    unnamed = [el for el in analysis.text_elements if not el.id]
    if unnamed:
        console.print("Suggested IDs for elements without ID:")
        for element in unnamed:
            console.print(f'  "{element.content[:40]}" → {element.suggested_id}', markup=False)
