"""Resolve value bindings against the render's data sources."""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from ..models.bindings import DataValue, StaticValue, ValueBinding
from ..models.data import DataSource, KvSource, Row, TableSource

logger = logging.getLogger(__name__)


class ValueResolver:
    """Turn a ``StaticValue``/``DataValue`` into display text.

    Inside a table body the row currently being instantiated takes precedence
    over the named source, so body cells read their own row instead of the
    source's first row.
    """

    def __init__(self, sources: Optional[Mapping[str, DataSource]] = None) -> None:
        self.sources: Mapping[str, DataSource] = sources or {}

    def resolve(
        self,
        binding: ValueBinding,
        row_data: Optional[Row] = None,
        row_source: Optional[str] = None,
    ) -> str:
        if isinstance(binding, StaticValue):
            return binding.text or ""

        if not isinstance(binding, DataValue):
            raise TypeError(f"Unsupported value binding: {binding!r}")

        if row_data is not None and row_source is not None and binding.source == row_source:
            return row_data.get(binding.key, "")

        source = self.sources.get(binding.source)
        if isinstance(source, KvSource):
            return source.get(binding.key)
        if isinstance(source, TableSource):
            return source.first_value(binding.key)

        logger.debug(f"Unknown data source {binding.source!r} for key {binding.key!r}")
        return ""
