"""Output formatting for statuses."""

import json

from bs4 import BeautifulSoup

from .models import Status


def clean_html_content(content: str) -> str:
    """Remove HTML tags from status content and normalize whitespace.

    Args:
        content: Raw content that may contain HTML

    Returns:
        Clean text content without HTML tags
    """
    if not content:
        return ""

    if "<" not in content and ">" not in content:
        return " ".join(content.split())

    soup = BeautifulSoup(content, "html.parser")

    for script in soup(["script", "style"]):
        script.decompose()

    # paragraphs and line breaks become separators
    text = soup.get_text(separator=" ")

    return " ".join(text.split())


def format_status_text(status: Status) -> str:
    """Render a status as one line: id, timestamp, account and text."""
    account = status.raw.get("account")
    acct = account.get("acct", "") if isinstance(account, dict) else ""
    created_at = status.created_at.isoformat() if status.created_at else "-"

    content = clean_html_content(status.raw.get("content") or "")
    spoiler = status.raw.get("spoiler_text")
    if spoiler:
        content = f"[CW: {clean_html_content(spoiler)}] {content}"

    return f"{status.id} {created_at} {acct}: {content}"


def format_status_json(status: Status) -> str:
    """Render the raw status as a single JSON line."""
    return json.dumps(status.raw, ensure_ascii=False)
