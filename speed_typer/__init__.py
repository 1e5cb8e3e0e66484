"""Typing-speed test engine with a pygame front-end."""

__version__ = "0.4.1"
