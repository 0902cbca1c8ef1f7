"""Live, unindexed substring search over a folder of text notes."""

__version__ = "0.1.0"
