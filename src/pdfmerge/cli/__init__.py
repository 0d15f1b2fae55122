"""Command-line interface for PDFMerge."""
