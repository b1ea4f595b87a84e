"""Recover chat transcripts from encrypted Conversations backup archives."""

__version__ = "0.1.0"
