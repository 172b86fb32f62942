"""Event-facing layer: controllers that hosts bind to pointer events."""
