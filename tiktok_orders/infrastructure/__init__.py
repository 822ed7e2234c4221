"""Infrastructure layer: configuration, logging and the backend HTTP client."""
