"""Asset store."""
