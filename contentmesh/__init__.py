"""contentmesh — content-health scoring, site mesh building and HTML sanitization."""

__version__ = "0.1.0"
