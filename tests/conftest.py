"""
Pytest configuration for svgreport
"""

import copy
import logging
import sys

import pytest

from svgreport.models import JobManifest, KvSource, TableSource, TemplateConfig


INVOICE_SVG = """<svg xmlns="http://www.w3.org/2000/svg" width="210mm" height="297mm" viewBox="0 0 793.7 1122.5">
  <text id="title" x="20" y="30" font-size="16">Title</text>
  <text id="customer" x="20" y="50" font-size="12">Customer</text>
  <text id="col_name" x="20" y="80" font-size="10">Name</text>
  <g id="rows">
    <g id="row" transform="translate(0, 100)">
      <text id="cell_name" x="20" y="0" font-size="10">name</text>
      <text id="cell_amount" x="150" y="0" font-size="10">0</text>
    </g>
  </g>
  <text id="page_no" x="180" y="280" font-size="8">1/1</text>
</svg>"""


INVOICE_TEMPLATE = {
    "schema": "svgreport-template/v0.2",
    "template": {"id": "invoice", "version": "1"},
    "pages": [
        {
            "id": "page-1",
            "svg": "page-1.svg",
            "kind": "first",
            "fields": [
                {"svg_id": "title", "value": {"type": "static", "text": "INVOICE"}},
            ],
            "tables": [
                {
                    "source": "items",
                    "row_group_id": "row",
                    "row_height_mm": 6,
                    "rows_per_page": 2,
                    "header": {
                        "cells": [
                            {"svg_id": "col_name", "value": {"type": "static", "text": "Item"}},
                        ]
                    },
                    "cells": [
                        {"svg_id": "cell_name", "value": {"type": "data", "source": "items", "key": "name"}},
                        {
                            "svg_id": "cell_amount",
                            "value": {"type": "data", "source": "items", "key": "amount"},
                            "format": "number",
                        },
                    ],
                }
            ],
            "page_number": {"svg_id": "page_no"},
        }
    ],
    "fields": [
        {"svg_id": "customer", "value": {"type": "data", "source": "meta", "key": "customer"}},
    ],
}


@pytest.fixture(autouse=True)
def configure_logging():
    """Console-only logging at WARNING for every test."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter('%(name)s - %(levelname)s - %(message)s'))

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    root_logger.handlers.clear()


@pytest.fixture
def invoice_svg():
    return INVOICE_SVG


@pytest.fixture
def template_dict():
    """Fresh copy of the invoice template document; tests may mutate it."""
    return copy.deepcopy(INVOICE_TEMPLATE)


@pytest.fixture
def invoice_template(template_dict):
    return TemplateConfig.from_dict(template_dict)


@pytest.fixture
def manifest():
    return JobManifest(job_id="job-001", template_id="invoice", template_version="1")


@pytest.fixture
def item_rows():
    return [{"name": f"Item {i}", "amount": str(1000 * (i + 1))} for i in range(5)]


@pytest.fixture
def sources(item_rows):
    return {
        "meta": KvSource(fields={"customer": "ACME Corp"}),
        "items": TableSource.from_rows(item_rows),
    }
