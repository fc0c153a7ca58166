"""Host Name Resolution — production HostResolver backed by the system resolver.

Invariants:
    - resolve_canonical_name returns the canonical name reported by getaddrinfo
    - OS lookup failures (gaierror, herror, UnicodeError) become HostResolutionError
    - No caching, no retry, no timeout: one blocking lookup per call

Design Decisions:
    - getaddrinfo with AI_CANONNAME follows CNAME chains like a CNAME lookup does,
      and works for hosts listed only in /etc/hosts
    - An empty canonname (resolver gave addresses but no name) falls back to the
      queried host, which is then already canonical for this resolver
"""

import logging
import socket

from repltopo.core.errors import HostResolutionError

logger = logging.getLogger(__name__)


class SocketHostResolver:
    """Resolves canonical host names through socket.getaddrinfo."""

    def resolve_canonical_name(self, host: str) -> str:
        try:
            results = socket.getaddrinfo(
                host, None,
                family=socket.AF_UNSPEC,
                type=socket.SOCK_STREAM,
                flags=socket.AI_CANONNAME,
            )
        except (socket.gaierror, socket.herror, UnicodeError) as e:
            logger.warning(
                f"Canonical name lookup failed for {host}: {e}",
                extra={"node_key": host, "error_code": "HOST_RESOLUTION_FAILED"},
            )
            raise HostResolutionError(host, str(e)) from e

        if not results:
            raise HostResolutionError(host, "No addresses returned")

        # Only the first entry carries canonname when AI_CANONNAME is set
        canonname = results[0][3]
        return canonname or host
