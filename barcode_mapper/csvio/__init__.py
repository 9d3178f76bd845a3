"""CSV input/output helpers."""
