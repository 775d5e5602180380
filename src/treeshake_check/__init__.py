"""treeshake-check: prove a JavaScript module leaves nothing behind but its import."""

__version__ = "0.3.0"
