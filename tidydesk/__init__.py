"""TidyDesk - batch file operations and folder organization assistant."""

__version__ = "1.0.0"
