"""Core line protocol model, rules and codec."""
