"""Core dashsync modules."""
