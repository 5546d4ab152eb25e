"""Little Stars - HTTP API."""
