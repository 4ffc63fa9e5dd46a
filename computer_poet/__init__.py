"""Computer Poet: template-driven Chinese verse generation."""

__version__ = "2.1.0"
