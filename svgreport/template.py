"""Template loading and accessors."""

from __future__ import annotations

import json
import logging
from typing import Any, List, Mapping, Optional, Union

from .exceptions import ConfigError
from .models.bindings import JobManifest, PageConfig, PageKind, TemplateConfig

logger = logging.getLogger(__name__)


def load_template(content: Union[str, bytes, Mapping[str, Any]]) -> TemplateConfig:
    """Build a :class:`TemplateConfig` from template JSON text or an already decoded mapping."""
    if isinstance(content, Mapping):
        data = content
    else:
        try:
            data = json.loads(content)
        except ValueError as exc:
            raise ConfigError("Invalid JSON in template", "template", str(exc)) from exc
        if not isinstance(data, Mapping):
            raise ConfigError("Invalid template", "template", "top-level JSON value must be an object")

    template = TemplateConfig.from_dict(data)
    logger.debug(f"Loaded template {template.template_id}@{template.version} with {len(template.pages)} page(s)")
    return template


def get_first_page(template: TemplateConfig) -> PageConfig:
    for page in template.pages:
        if page.kind == PageKind.FIRST:
            return page
    raise ConfigError(
        "No first page defined in template",
        "template",
        'Expected at least one page with kind="first"',
    )


def get_repeat_page(template: TemplateConfig) -> Optional[PageConfig]:
    for page in template.pages:
        if page.kind == PageKind.REPEAT:
            return page
    return None


def get_referenced_sources(template: TemplateConfig) -> List[str]:
    """Every data source name a template reads, in first-use order."""
    sources: List[str] = []

    def add(name: Optional[str]) -> None:
        if name and name not in sources:
            sources.append(name)

    for field in template.fields:
        add(getattr(field.value, "source", None))
    for page in template.pages:
        for field in page.fields:
            add(getattr(field.value, "source", None))
        for table in page.tables:
            add(table.source)
            for cell in table.header_cells:
                add(getattr(cell.value, "source", None))
    return sources


def validate_template_match(template: TemplateConfig, manifest: JobManifest) -> None:
    """Raise ``ConfigError`` when the manifest names a different template id or version."""
    if template.template_id != manifest.template_id:
        raise ConfigError(
            f"Template ID mismatch: expected {manifest.template_id}, got {template.template_id}",
            "template",
            "Template ID does not match manifest",
        )
    if template.version != manifest.template_version:
        raise ConfigError(
            f"Template version mismatch: expected {manifest.template_version}, got {template.version}",
            "template",
            "Template version does not match manifest",
        )
