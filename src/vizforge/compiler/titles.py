"""Title handling for generated metrics.

the metadata server rejects titles over 255 chars, and PoP titles get a
suffix appended, so long measure titles have to be cut down first.
"""

MAX_TITLE_LENGTH = 255
ELLIPSIS = "…"
POP_SUFFIX = " - previous year"


def get_metric_title(title: str | None, suffix: str = "") -> str:
    """Append suffix to title, truncating the title so the result fits.

    a trailing ")" survives truncation - "Revenue (EUR)" shouldn't turn into
    an unbalanced "Revenue (EU…".
    """
    title = title or ""
    max_length = MAX_TITLE_LENGTH - len(suffix)
    if len(title) <= max_length:
        return f"{title}{suffix}"

    if title.endswith(")"):
        return f"{title[: max_length - 2]}{ELLIPSIS}){suffix}"
    return f"{title[: max_length - 1]}{ELLIPSIS}{suffix}"


def get_base_metric_title(title: str | None) -> str:
    return get_metric_title(title)


def get_pop_metric_title(title: str | None) -> str:
    return get_metric_title(title, POP_SUFFIX)
