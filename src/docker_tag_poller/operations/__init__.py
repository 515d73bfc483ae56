"""Registry operations built on top of the core fetcher."""
