"""Game rules and referee."""
