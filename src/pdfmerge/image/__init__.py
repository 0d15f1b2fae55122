"""Image handling: metadata extraction and fit-to-page resampling."""

from pdfmerge.image.metadata import ImageDetails, MetadataExtractor, read_exif_tags, sha256_hex
from pdfmerge.image.normalizer import ImageNormalizer, NormalizedImage, fit_to_budget

__all__ = [
    "ImageDetails",
    "ImageNormalizer",
    "MetadataExtractor",
    "NormalizedImage",
    "fit_to_budget",
    "read_exif_tags",
    "sha256_hex",
]
