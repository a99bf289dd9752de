"""Performance and cost simulation engine for system-architecture diagrams."""

__version__ = "0.1.0"
