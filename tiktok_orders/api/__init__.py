"""Dashboard HTTP layer."""
