"""Static development server with SPA fallback and live reload."""

__version__ = "1.0.0"
