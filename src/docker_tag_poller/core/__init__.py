"""Core HTTP and data-model building blocks."""
