"""Product catalog editor.

This package contains the catalog core (entity model, persisted-collection
storage engine, image slot management) and the thin HTTP and CLI views that
drive it.
"""

__version__ = "0.1.0"
