"""Configuration settings using pydantic-settings."""

import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, YamlConfigSettingsSource

from pdfmerge.config.constants import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_CHUNK_PAUSE,
    DEFAULT_CONFIG_FILE,
    DEFAULT_IMAGE_DPI,
    DEFAULT_JPEG_QUALITY,
    DEFAULT_LINK_TTL,
    DEFAULT_LOG_DIR,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_PAPER_SIZE,
    DEFAULT_RUN_TIMEOUT,
    DEFAULT_WATERMARK_COLOR,
    DEFAULT_WATERMARK_OPACITY,
    DEFAULT_WATERMARK_TEXT,
    USER_CONFIG_FILE,
)

PaperSize = Literal["A0", "A1", "A2", "A3", "A4"]

_HEX_COLOR = re.compile(r"^#?[0-9a-fA-F]{6}$")


def config_locations() -> list[Path]:
    """Config files that are read, highest priority first.

    Resolved on every call so a changed working directory or HOME is seen.
    """
    return [
        Path.cwd() / DEFAULT_CONFIG_FILE,
        Path.home() / USER_CONFIG_FILE,
    ]


class PageConfig(BaseModel):
    """Output page configuration."""

    paper_size: PaperSize = DEFAULT_PAPER_SIZE
    landscape: bool = False


class AnnotationConfig(BaseModel):
    """Image page annotation defaults (the persisted checkbox states)."""

    print_details: bool = False
    print_page_numbers: bool = False
    print_hash: bool = False


class WatermarkConfig(BaseModel):
    """Watermark configuration."""

    enabled: bool = False
    text: str = DEFAULT_WATERMARK_TEXT
    color: str = DEFAULT_WATERMARK_COLOR
    opacity: float = Field(default=DEFAULT_WATERMARK_OPACITY, ge=0.0, le=1.0)

    @field_validator("color")
    @classmethod
    def _check_color(cls, value: str) -> str:
        if not _HEX_COLOR.match(value):
            raise ValueError(f"Expected a #RRGGBB colour, got {value!r}")
        return value if value.startswith("#") else f"#{value}"


class BatchConfig(BaseModel):
    """Batch processing configuration."""

    batch_size: int = Field(default=DEFAULT_BATCH_SIZE, ge=1)
    chunk_pause: float = Field(default=DEFAULT_CHUNK_PAUSE, ge=0.0)
    timeout: float = Field(default=DEFAULT_RUN_TIMEOUT, gt=0.0)


class ImageConfig(BaseModel):
    """Image normalisation configuration."""

    dpi: int = Field(default=DEFAULT_IMAGE_DPI, ge=1)
    jpeg_quality: int = Field(default=DEFAULT_JPEG_QUALITY, ge=1, le=100)


class FontConfig(BaseModel):
    """Font files for the three faces used on output pages.

    Unset faces fall back to the built-in Helvetica family.
    """

    regular: str | None = None
    bold: str | None = None
    black: str | None = None


class OutputConfig(BaseModel):
    """Output configuration."""

    default_dir: str = DEFAULT_OUTPUT_DIR
    on_conflict: Literal["skip", "overwrite", "rename"] = "rename"
    link_ttl: int = Field(default=DEFAULT_LINK_TTL, ge=1)


class PDFMergeSettings(BaseSettings):
    """Main configuration class for PDFMerge."""

    model_config = SettingsConfigDict(
        env_prefix="PDFMERGE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings
    ):
        """Customize settings sources to include the YAML config files.

        Files are read lowest priority first; a top-level section in a
        later file replaces the same section from an earlier one.
        """
        yaml_files = list(reversed(config_locations()))
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=yaml_files),
            file_secret_settings,
        )

    # Sub-configurations
    page: PageConfig = Field(default_factory=PageConfig)
    annotations: AnnotationConfig = Field(default_factory=AnnotationConfig)
    watermark: WatermarkConfig = Field(default_factory=WatermarkConfig)
    batch: BatchConfig = Field(default_factory=BatchConfig)
    image: ImageConfig = Field(default_factory=ImageConfig)
    fonts: FontConfig = Field(default_factory=FontConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    # Global settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_dir: str = DEFAULT_LOG_DIR

    def get_output_dir(self, base_path: Path | None = None) -> Path:
        """Get the output directory path."""
        if base_path:
            return base_path / self.output.default_dir
        return Path(self.output.default_dir)


@lru_cache
def get_settings() -> PDFMergeSettings:
    """Get cached settings instance."""
    return PDFMergeSettings()


def reload_settings() -> PDFMergeSettings:
    """Force reload settings (clear cache)."""
    get_settings.cache_clear()
    return get_settings()


@dataclass(frozen=True)
class WatermarkOptions:
    """Watermark parameters for a single run."""

    text: str = DEFAULT_WATERMARK_TEXT
    color: str = DEFAULT_WATERMARK_COLOR
    opacity: float = DEFAULT_WATERMARK_OPACITY


@dataclass(frozen=True)
class ConversionOptions:
    """Immutable configuration value consumed by one conversion run."""

    print_details: bool = False
    print_page_numbers: bool = False
    print_hash: bool = False
    landscape: bool = False
    paper_size: str = DEFAULT_PAPER_SIZE
    watermark: WatermarkOptions | None = None

    @property
    def annotates_images(self) -> bool:
        """Whether any image annotation is enabled."""
        return self.print_details or self.print_page_numbers or self.print_hash


class OptionToggles:
    """Mutable toggle panel that produces per-run option snapshots.

    Mirrors the user-facing switches. The watermark toggle is one-shot:
    the pipeline clears it when a run ends, whatever the outcome.
    """

    def __init__(
        self,
        print_details: bool = False,
        print_page_numbers: bool = False,
        print_hash: bool = False,
        landscape: bool = False,
        paper_size: str = DEFAULT_PAPER_SIZE,
        add_watermark: bool = False,
        watermark_text: str = DEFAULT_WATERMARK_TEXT,
        watermark_color: str = DEFAULT_WATERMARK_COLOR,
        watermark_opacity: float = DEFAULT_WATERMARK_OPACITY,
    ) -> None:
        self.print_details = print_details
        self.print_page_numbers = print_page_numbers
        self.print_hash = print_hash
        self.landscape = landscape
        self.paper_size = paper_size
        self.add_watermark = add_watermark
        self.watermark_text = watermark_text
        self.watermark_color = watermark_color
        self.watermark_opacity = watermark_opacity

    @classmethod
    def from_settings(cls, settings: PDFMergeSettings) -> "OptionToggles":
        """Seed toggles from the configured defaults."""
        return cls(
            print_details=settings.annotations.print_details,
            print_page_numbers=settings.annotations.print_page_numbers,
            print_hash=settings.annotations.print_hash,
            landscape=settings.page.landscape,
            paper_size=settings.page.paper_size,
            add_watermark=settings.watermark.enabled,
            watermark_text=settings.watermark.text,
            watermark_color=settings.watermark.color,
            watermark_opacity=settings.watermark.opacity,
        )

    def snapshot(self) -> ConversionOptions:
        """Freeze the current toggle state into a ConversionOptions value."""
        watermark = None
        if self.add_watermark:
            watermark = WatermarkOptions(
                # Empty text falls back to the product name
                text=self.watermark_text or DEFAULT_WATERMARK_TEXT,
                color=self.watermark_color or DEFAULT_WATERMARK_COLOR,
                opacity=self.watermark_opacity or DEFAULT_WATERMARK_OPACITY,
            )
        return ConversionOptions(
            print_details=self.print_details,
            print_page_numbers=self.print_page_numbers,
            print_hash=self.print_hash,
            landscape=self.landscape,
            paper_size=self.paper_size,
            watermark=watermark,
        )

    def clear_watermark(self) -> None:
        """Switch the watermark toggle back off."""
        self.add_watermark = False
