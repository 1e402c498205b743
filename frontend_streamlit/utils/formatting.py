from datetime import datetime


def preview(content: str, limit: int = 160) -> str:
    text = " ".join((content or "").split())
    if len(text) <= limit:
        return text
    return text[: limit - 1].rstrip() + "…"


def format_timestamp(value: str | None) -> str:
    """ISO timestamp from the API → '18 Oct 2026, 14:05'. Unparseable values pass through."""
    if not value:
        return ""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return parsed.strftime("%d %b %Y, %H:%M")
