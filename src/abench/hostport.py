from typing import Tuple
from urllib.parse import SplitResult

from .errors import FatalResolutionError

DEFAULT_PORTS = {
    'http': 80,
    'https': 443,
}


def authority_of(parts: SplitResult) -> str:
    """Return ``host[:port]`` of a split URL, without any userinfo."""
    return parts.netloc.rpartition('@')[2]


def resolve_host_port(parts: SplitResult) -> Tuple[str, int]:
    """Derive the host and port to connect to from a split URL.

    The authority is cut at its last colon when that colon is not the first
    character. Without a usable colon the whole authority is the host and the
    port comes from the scheme: 80 for http, 443 for https and 0 for anything
    else. A leading colon (``:8080``) therefore counts as "no port" and stays
    part of the host.

    Raises FatalResolutionError when the port text is not a number.
    """
    authority = authority_of(parts)
    pos = authority.rfind(':')
    if pos > 0:
        host = authority[:pos]
        port_text = authority[pos + 1:]
        if not (port_text.isascii() and port_text.isdigit()):
            raise FatalResolutionError(f"Invalid port {port_text!r} in {authority!r}", authority)
        port = int(port_text, 10)
        if port > 65535:
            raise FatalResolutionError(f"Port {port} out of range in {authority!r}", authority)
        return host, port

    return authority, DEFAULT_PORTS.get(parts.scheme, 0)
