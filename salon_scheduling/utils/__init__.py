"""Pure helpers shared across the scheduling engine."""
