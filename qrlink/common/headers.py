"""Proxy header parsing for building payload origins."""

from typing import Dict, Optional


def _first(value: Optional[str]) -> Optional[str]:
    # Proxies append hops; the client-facing one comes first.
    if not value:
        return None
    return value.split(",")[0].strip() or None


def _parse_forwarded(value: Optional[str]) -> Dict[str, str]:
    """Parse the first element of an RFC 7239 ``Forwarded`` header."""
    element = _first(value)
    if not element:
        return {}

    pairs = {}
    for part in element.split(";"):
        key, sep, val = part.partition("=")
        if sep:
            pairs[key.strip().lower()] = val.strip().strip('"')
    return pairs


def extract_forwarded_headers(headers: Dict[str, str]) -> Dict[str, Optional[str]]:
    """Client-facing proto, host and address as reported by proxies.

    ``X-Forwarded-*`` headers win over ``Forwarded``.

    Returns:
        Dictionary with forwarded_proto, forwarded_host, forwarded_for
    """
    lowered = {k.lower(): v for k, v in headers.items()}
    rfc = _parse_forwarded(lowered.get("forwarded"))

    return {
        "forwarded_proto": _first(lowered.get("x-forwarded-proto")) or rfc.get("proto"),
        "forwarded_host": _first(lowered.get("x-forwarded-host")) or rfc.get("host"),
        "forwarded_for": _first(lowered.get("x-forwarded-for")) or rfc.get("for"),
    }


def build_origin(
    headers: Dict[str, str],
    fallback_base_url: str,
    request_scheme: Optional[str] = None,
    request_host: Optional[str] = None,
) -> str:
    """Origin that scanned codes should point back to.

    Forwarded proto and host are used when both are present, then the
    request's own scheme and Host header, then the configured base URL.

    Returns:
        Origin without trailing slash (e.g., https://example.com)
    """
    forwarded = extract_forwarded_headers(headers)
    proto, host = forwarded["forwarded_proto"], forwarded["forwarded_host"]

    if proto and host:
        return f"{proto}://{host}"
    if request_scheme and request_host:
        return f"{request_scheme}://{request_host}"
    return fallback_base_url.rstrip("/")
