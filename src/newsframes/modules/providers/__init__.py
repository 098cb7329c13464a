"""External resource providers."""
