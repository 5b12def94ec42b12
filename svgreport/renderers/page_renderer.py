"""Page assembly: turns a template, data sources and base SVGs into finished pages."""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Sequence

from lxml import etree

from ..config import RenderOptions
from ..engine.formatter import FormatterRegistry
from ..engine.paginator import build_page_plan, calculate_total_pages, page_config_for
from ..engine.row_engine import RowInstantiationEngine, find_row_template
from ..engine.text_fit import TextFitEngine
from ..engine.text_metrics import TextMetricsEngine
from ..engine.value_resolver import ValueResolver
from ..exceptions import BindingWarning, ConfigError, DataError
from ..models.bindings import CellBinding, JobManifest, PageConfig, TemplateConfig
from ..models.data import (
    BindingOutcome,
    DataSource,
    KvSource,
    PageInfo,
    RenderedPage,
    RenderResult,
    Row,
    TableSource,
)
from ..template import get_first_page, get_repeat_page
from ..utils.xml_utils import SvgSource, clone_document, parse_svg, require_element_by_id, serialize_svg, set_text_content

logger = logging.getLogger(__name__)

META_SOURCE = "meta"


class Renderer:
    """Renders every page of one report job.

    Base documents and data sources are shared read-only inputs; each page
    works on its own deep copy of its base document. Formatter presets from
    the template are registered on a registry owned by this renderer.
    """

    def __init__(
        self,
        manifest: JobManifest,
        template: TemplateConfig,
        sources: Mapping[str, DataSource],
        page_svgs: Mapping[str, SvgSource],
        options: Optional[RenderOptions] = None,
    ) -> None:
        self.manifest = manifest
        self.template = template
        self.sources = dict(sources)
        self.page_svgs: Dict[str, etree._ElementTree] = {
            page_id: parse_svg(svg) for page_id, svg in page_svgs.items()
        }
        self.options = options or RenderOptions()

        self.formatters = FormatterRegistry(template.formatters)
        self.resolver = ValueResolver(self.sources)
        self.text_fit = TextFitEngine(
            metrics=TextMetricsEngine(line_spacing=self.options.line_height_ratio),
            formatters=self.formatters,
            options=self.options,
        )
        self.row_engine = RowInstantiationEngine(self.text_fit, mm_factor=self.options.mm_to_units)

    def render(self) -> RenderResult:
        """Render all pages.

        Raises:
            ConfigError: no first page, bad rows_per_page, missing page SVG or row template
            DataError: the ``meta`` source is missing or not key-value
        """
        first_page = get_first_page(self.template)
        repeat_page = get_repeat_page(self.template)
        self._require_meta()

        table_data = self._table_data()
        total_pages = calculate_total_pages(table_data, first_page)
        plan = build_page_plan(table_data, first_page, repeat_page, total_pages)

        result = RenderResult(
            job_id=self.manifest.job_id,
            template_id=self.template.template_id,
            template_version=self.template.version,
            total_pages=total_pages,
        )

        for info in plan:
            config = page_config_for(info.page_number, first_page, repeat_page)
            svg_string = self.render_page(info, config, total_pages, result.outcomes)
            result.pages.append(RenderedPage(page_number=info.page_number, svg_string=svg_string))

        skipped = len(result.warnings)
        logger.info(
            f"Rendered job {result.job_id!r}: {total_pages} page(s)"
            + (f", {skipped} binding(s) skipped" if skipped else "")
        )
        return result

    def render_page(
        self,
        info: PageInfo,
        config: PageConfig,
        total_pages: int,
        outcomes: List[BindingOutcome],
    ) -> str:
        doc = self._clone_page_svg(config.id)
        page_number = info.page_number

        self._apply_fields(doc, self.template.fields, page_number, outcomes)
        self._apply_fields(doc, config.fields, page_number, outcomes)

        for table in config.tables:
            self._apply_fields(doc, table.header_cells, page_number, outcomes)

            chunk = info.table_chunks.get(table.source)
            if chunk is None or not chunk.rows:
                # a bad row group id must fail even on pages without rows
                find_row_template(doc, table.row_group_id)
                continue

            def resolve_cell(cell: CellBinding, row: Row, source: str = table.source) -> str:
                return self.resolver.resolve(cell.value, row_data=row, row_source=source)

            self.row_engine.apply(doc, table, chunk, resolve_cell)

        if config.page_number is not None:
            self._apply_page_number(doc, config, page_number, total_pages, outcomes)

        return serialize_svg(doc)

    # ------------------------------------------------------------------
    # helpers

    def _require_meta(self) -> KvSource:
        meta = self.sources.get(META_SOURCE)
        if not isinstance(meta, KvSource):
            raise DataError(
                "Meta data not found or invalid",
                "inputs",
                f'Expected kv data source named "{META_SOURCE}"',
            )
        return meta

    def _table_data(self) -> Dict[str, Sequence[Row]]:
        return {name: source.rows for name, source in self.sources.items() if isinstance(source, TableSource)}

    def _clone_page_svg(self, page_id: str) -> etree._ElementTree:
        base = self.page_svgs.get(page_id)
        if base is None:
            raise ConfigError(
                f"SVG not found for page: {page_id}",
                "template",
                f'No SVG loaded for page id "{page_id}"',
            )
        return clone_document(base)

    def _apply_fields(
        self,
        doc: etree._ElementTree,
        bindings: Sequence[CellBinding],
        page_number: int,
        outcomes: List[BindingOutcome],
    ) -> None:
        for binding in bindings:
            if not binding.enabled:
                continue
            value = self.resolver.resolve(binding.value)
            try:
                self.text_fit.apply(doc, binding, value)
            except BindingWarning as warning:
                self._record_skip(warning, page_number, outcomes)
                continue
            outcomes.append(BindingOutcome(page_number=page_number, svg_id=binding.svg_id, applied=True))

    def _apply_page_number(
        self,
        doc: etree._ElementTree,
        config: PageConfig,
        page_number: int,
        total_pages: int,
        outcomes: List[BindingOutcome],
    ) -> None:
        page_number_config = config.page_number
        text = page_number_config.render(page_number, total_pages, self.options.default_page_number_format)
        try:
            element = require_element_by_id(doc, page_number_config.svg_id, "page-number")
        except BindingWarning as warning:
            self._record_skip(warning, page_number, outcomes)
            return
        set_text_content(element, text)
        outcomes.append(BindingOutcome(page_number=page_number, svg_id=page_number_config.svg_id, applied=True))

    def _record_skip(self, warning: BindingWarning, page_number: int, outcomes: List[BindingOutcome]) -> None:
        if self.options.strict:
            raise warning
        logger.warning(f"Page {page_number}: {warning.message}")
        outcomes.append(
            BindingOutcome(
                page_number=page_number,
                svg_id=warning.svg_id or "",
                applied=False,
                message=warning.message,
            )
        )


def render_report(
    manifest: JobManifest,
    template: TemplateConfig,
    sources: Mapping[str, DataSource],
    page_svgs: Mapping[str, SvgSource],
    options: Optional[RenderOptions] = None,
) -> RenderResult:
    """Render a report in one call."""
    return Renderer(manifest, template, sources, page_svgs, options).render()
