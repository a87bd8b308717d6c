"""Generate Figma Code Connect files from annotated web components."""

__version__ = "0.1.0"
