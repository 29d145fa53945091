"""eventrelay: actor identity resolution and analytics event dispatch."""

__version__ = "0.1.0"
