"""Domain layer for the identity store."""
