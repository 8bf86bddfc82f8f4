"""Brand Intelligence.

Score language-model answers for brand presence, sentiment, competitive
standing and citation authority, and roll them up into brand health.
"""

__version__ = "0.1.0"
