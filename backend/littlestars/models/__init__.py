"""Little Stars - Models initialization."""
from littlestars.models.child import Child
from littlestars.models.progress import (
    ActivityType,
    ContentType,
    DailyActivity,
    ProgressRecord,
)


__all__ = [
    # Child models
    "Child",
    # Progress models
    "ProgressRecord",
    "DailyActivity",
    "ContentType",
    "ActivityType",
]
