"""PDFMerge - assemble images and PDFs into a single annotated PDF."""

__version__ = "0.1.0"
