"""URL building utilities for redirect payloads."""

from urllib.parse import quote

# Characters left unescaped by JavaScript's encodeURIComponent.
URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_uri_component(value: str) -> str:
    """Percent-encode a value for use inside a query parameter."""
    return quote(value, safe=URI_COMPONENT_SAFE)


def build_redirect_url(
    base_url: str,
    redirect_path: str,
    param: str,
    encoded_value: str,
) -> str:
    """Build a complete redirect URL.

    Args:
        base_url: Origin (e.g., https://example.com)
        redirect_path: Redirect endpoint path (e.g., /q)
        param: Query parameter key
        encoded_value: Already percent-encoded parameter value

    Returns:
        URL of the form <origin>/<path>?<param>=<value>
    """
    base = base_url.rstrip("/")
    path = redirect_path.strip("/")

    if path:
        return f"{base}/{path}?{param}={encoded_value}"
    return f"{base}/?{param}={encoded_value}"


def normalize_destination(url: str) -> str:
    """Prefix https:// when the destination carries no http(s) scheme."""
    if url.startswith("http://") or url.startswith("https://"):
        return url
    return f"https://{url}"
