"""
Core utilities shared across the notes API: configuration, error taxonomy,
logging setup, password/token primitives and rate limiting.
"""
