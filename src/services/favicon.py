"""Favicon URL derivation."""
from urllib.parse import urlparse

DEFAULT_FAVICON_TEMPLATE = "https://www.google.com/s2/favicons?domain={host}&sz=64"


def derive_favicon(url: str | None, template: str = DEFAULT_FAVICON_TEMPLATE) -> str:
    """
    Derive a favicon URL from the host of ``url``.

    Returns an empty string when the URL cannot be parsed or has no host.
    """
    if not url:
        return ""
    try:
        host = urlparse(url).hostname
    except ValueError:
        return ""
    if not host:
        return ""
    return template.format(host=host)
