"""Database models and migrations support."""
