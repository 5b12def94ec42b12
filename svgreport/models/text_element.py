"""Records produced by the SVG text extractor."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(slots=True)
class BBox:
    x: float
    y: float
    w: float
    h: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "w": self.w, "h": self.h}


@dataclass(slots=True)
class TextElementInfo:
    id: Optional[str]
    content: str
    x: float
    y: float
    dom_index: int
    suggested_id: str
    text_anchor: Optional[str] = None
    font_size: Optional[float] = None
    font_family: Optional[str] = None
    is_synthetic_from_glyphs: bool = False
    parent_group: Optional[str] = None
    bbox: Optional[BBox] = None


@dataclass(slots=True)
class PageSize:
    width: float
    height: float
    unit: str = "px"


@dataclass(slots=True)
class TextStatistics:
    total: int = 0
    with_id: int = 0
    without_id: int = 0
    path_text: int = 0
    average_font_size: Optional[float] = None


@dataclass(slots=True)
class SvgTextAnalysis:
    page_size: PageSize
    text_elements: List[TextElementInfo] = field(default_factory=list)
    statistics: TextStatistics = field(default_factory=TextStatistics)
    warnings: List[str] = field(default_factory=list)
    name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready export in the shape the template editor consumes."""
        return {
            "file": self.name,
            "pageSize": {
                "width": self.page_size.width,
                "height": self.page_size.height,
                "unit": self.page_size.unit,
            },
            "elements": [
                {
                    "index": index,
                    "id": el.id,
                    "suggestedId": el.suggested_id,
                    "content": el.content,
                    "position": {"x": el.x, "y": el.y},
                    "fontSize": el.font_size,
                    "fontFamily": el.font_family,
                    "parentGroup": el.parent_group,
                    "isPath": el.is_synthetic_from_glyphs,
                    "bbox": el.bbox.to_dict() if el.bbox else None,
                }
                for index, el in enumerate(self.text_elements, start=1)
            ],
            "statistics": {
                "total": self.statistics.total,
                "withId": self.statistics.with_id,
                "withoutId": self.statistics.without_id,
                "pathText": self.statistics.path_text,
                "averageFontSize": self.statistics.average_font_size,
            },
            "warnings": list(self.warnings),
        }
