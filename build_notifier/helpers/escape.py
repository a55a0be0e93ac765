"""Text escaping for Slack message markup."""

# Order matters: "&" first so the entities produced below are not re-escaped.
_REPLACEMENTS = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
)


def escape(text: str) -> str:
    """
    Escape the characters Slack reserves for markup.

    Already-escaped entities are escaped again ("&amp;" -> "&amp;amp;").

    Args:
        text: Arbitrary user- or repository-controlled text

    Returns:
        Text safe to embed in a message
    """
    for char, entity in _REPLACEMENTS:
        text = text.replace(char, entity)
    return text


def link(url: str, label: str) -> str:
    """Slack link markup. ``label`` is inserted as-is."""
    return f"<{url}|{label}>"
