"""Little Stars - Progress & Gamification Engine."""
