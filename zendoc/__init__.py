"""Documentation site generator for component, page and API codebases."""

__version__ = "0.1.0"
