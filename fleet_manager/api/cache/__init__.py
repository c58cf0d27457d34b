"""In-memory response caching."""
