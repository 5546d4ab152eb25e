"""Little Stars - Pydantic schemas."""
