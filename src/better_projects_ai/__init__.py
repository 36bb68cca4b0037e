"""AI summaries and task drafting for Better Projects."""

__version__ = "1.0.0"
