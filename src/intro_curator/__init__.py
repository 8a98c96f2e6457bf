"""Discord bot that turns templated introductions into profile cards."""

__version__ = "0.1.0"
