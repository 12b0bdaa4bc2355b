"""Core tag parsing, indexing and vault file operations."""
