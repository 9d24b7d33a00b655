"""Registry access."""
