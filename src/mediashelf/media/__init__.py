"""Asset lifecycle engine."""
