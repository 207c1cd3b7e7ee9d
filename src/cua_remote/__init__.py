"""cua-remote: drive a cloud desktop sandbox with a vision-language action planner."""

__version__ = "0.1.0"
