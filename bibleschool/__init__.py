"""Backend for the Bible-study virtual school."""

__version__ = "0.1.0"
