"""stacksniff - detect the technology stack of a project directory."""

__version__ = "0.4.0"
