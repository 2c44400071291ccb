"""Database schema model with relation repair, filtering, cloning and JSON/YAML output."""

__version__ = "1.85.4"
__all__ = ["__version__"]