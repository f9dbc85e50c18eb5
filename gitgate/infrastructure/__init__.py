"""Infrastructure layer for gitgate."""
