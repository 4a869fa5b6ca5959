"""Icons and glyphs used across the UI."""

ICON_BOARD = "\U0001f4cb"
ICON_TASK = "\U0001f4dd"
ICON_PERSON = "\U0001f464"
ICON_CALENDAR = "\U0001f4c5"
ICON_COMMENT = "\U0001f4ac"
ICON_TAG = "\U0001f3f7"
ICON_EDIT = "✏️"
ICON_DELETE = "\U0001f5d1"
ICON_CLOSE = "❌"
ICON_BACK = "\U0001f519"
ICON_DONE = "✅"

PRIORITY_ICONS = {
    "low": "\U0001f7e2",
    "medium": "\U0001f7e1",
    "high": "\U0001f534",
}

BAR_FULL = "█"
BAR_EMPTY = "░"
