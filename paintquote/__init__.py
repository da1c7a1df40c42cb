"""PaintQuote: pricing engine and settings service for painting contractors."""
