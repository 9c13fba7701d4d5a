"""Storage quota aggregation."""
