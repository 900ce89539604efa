"""External service boundaries."""
