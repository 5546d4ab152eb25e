"""Little Stars - Core configuration, database and errors."""
