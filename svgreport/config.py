"""Render options for svgreport."""

from typing import Any, Dict

from .engine.geometry import MM_TO_UNITS
from .exceptions import ConfigError
from .models.bindings import DEFAULT_PAGE_NUMBER_FORMAT

GLYPH_SPLIT_PROFILES = ("balanced", "split", "merge")


class RenderOptions:
    """Tunable constants for rendering and text analysis."""

    def __init__(
        self,
        mm_to_units: float = MM_TO_UNITS,
        default_page_number_format: str = DEFAULT_PAGE_NUMBER_FORMAT,
        default_font_size: float = 12.0,
        min_font_size: float = 4.0,
        line_height_ratio: float = 1.2,
        glyph_split_profile: str = "balanced",
        strict: bool = False,
    ):
        """
        Initialize render options.

        Args:
            mm_to_units: SVG user units per millimetre (row height / start offset conversion)
            default_page_number_format: Format used when a page number binding has none
            default_font_size: Font size assumed for elements that declare none
            min_font_size: Lower bound for shrink-to-fit
            line_height_ratio: Line height as a multiple of font size for wrapped text
            glyph_split_profile: Glyph clustering profile ("balanced", "split" or "merge")
            strict: Abort the render on a missing binding target instead of skipping it
        """
        if mm_to_units <= 0:
            raise ConfigError("Invalid option", "config", f"mm_to_units must be > 0, got {mm_to_units}")
        if min_font_size <= 0 or default_font_size <= 0:
            raise ConfigError("Invalid option", "config", "font sizes must be > 0")
        if line_height_ratio <= 0:
            raise ConfigError("Invalid option", "config", f"line_height_ratio must be > 0, got {line_height_ratio}")
        if glyph_split_profile not in GLYPH_SPLIT_PROFILES:
            raise ConfigError(
                "Invalid option",
                "config",
                f"glyph_split_profile must be one of {', '.join(GLYPH_SPLIT_PROFILES)}",
            )

        self.mm_to_units = mm_to_units
        self.default_page_number_format = default_page_number_format
        self.default_font_size = default_font_size
        self.min_font_size = min_font_size
        self.line_height_ratio = line_height_ratio
        self.glyph_split_profile = glyph_split_profile
        self.strict = strict

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RenderOptions":
        known = {
            "mm_to_units",
            "default_page_number_format",
            "default_font_size",
            "min_font_size",
            "line_height_ratio",
            "glyph_split_profile",
            "strict",
        }
        unknown = set(data) - known
        if unknown:
            raise ConfigError("Unknown option", "config", ", ".join(sorted(unknown)))
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mm_to_units": self.mm_to_units,
            "default_page_number_format": self.default_page_number_format,
            "default_font_size": self.default_font_size,
            "min_font_size": self.min_font_size,
            "line_height_ratio": self.line_height_ratio,
            "glyph_split_profile": self.glyph_split_profile,
            "strict": self.strict,
        }
