"""Map a CSV of item barcodes to Sierra item record numbers."""

__version__ = "0.1.0"
