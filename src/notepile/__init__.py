"""notepile - a scrollable viewer for rendered Markdown notes."""

__version__ = "0.3.0"
