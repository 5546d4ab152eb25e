"""Little Stars - Gamification services."""
