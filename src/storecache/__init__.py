"""storecache: cascading cache invalidation for multi-tenant retail reporting."""

__version__ = "0.1.0"
