"""Configuration module."""

from pdfmerge.config.settings import (
    ConversionOptions,
    OptionToggles,
    PDFMergeSettings,
    WatermarkOptions,
    get_settings,
    reload_settings,
)

__all__ = [
    "ConversionOptions",
    "OptionToggles",
    "PDFMergeSettings",
    "WatermarkOptions",
    "get_settings",
    "reload_settings",
]
