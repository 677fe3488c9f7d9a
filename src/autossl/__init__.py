"""autossl - embedded bash runtime manager for the auto-ssl toolkit."""

__version__ = "0.4.0"
