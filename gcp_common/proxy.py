# Copyright 2023 - Greg Hecht - All Rights Reserved
# Licensed to Sola Insurance, all modifications and reuse permitted within that organization.

from typing import NamedTuple, Optional
from urllib.parse import urlsplit, urlunsplit

"""Parsing of HTTP proxy addresses.

A proxy is configured as a plain string, either `host:port` or `scheme://host:port`, where the scheme is `http` or
`https`. Anything else carried in the string (a path, a query, a fragment, a user) is rejected rather than silently
dropped.

Example usage:
```
    address = parse_proxy_address('proxy.internal:3128')
    address.host  # 'proxy.internal'
    address.port  # 3128
    address.url   # 'http://proxy.internal:3128'
```
"""

SUPPORTED_SCHEMES = ('http', 'https')
DEFAULT_SCHEME = 'http'


class ProxyAddress(NamedTuple):
    scheme: Optional[str]
    host: str
    port: int

    @property
    def netloc(self) -> str:
        # IPv6 literals have to be bracketed to be followed by a port.
        host = f'[{self.host}]' if ':' in self.host else self.host
        return f'{host}:{self.port}'

    @property
    def url(self) -> str:
        """The address as a URL usable in a `requests` proxies map. A missing scheme means a plain HTTP proxy."""
        return f'{self.scheme or DEFAULT_SCHEME}://{self.netloc}'


def parse_proxy_address(proxy: Optional[str]) -> Optional[ProxyAddress]:
    """Parse and validate the given proxy string.

    :param proxy: Proxy string like `host:port` or `http://host:port`. May be None or empty.
    :returns: The parsed ProxyAddress, or None if no proxy was given.
    :raises ValueError: If the string is not a valid proxy address.
    """
    if not proxy:
        return None

    uri_string = proxy if '//' in proxy else '//' + proxy
    try:
        parts = urlsplit(uri_string)
        port = parts.port
    except ValueError as e:
        raise ValueError(f"Invalid proxy address '{proxy}'.") from e

    # urlsplit lowercases the scheme, compare against what was actually written.
    scheme = uri_string[:len(parts.scheme)] or None
    if scheme is not None and scheme not in SUPPORTED_SCHEMES:
        raise ValueError(f"HTTP proxy address '{proxy}' has invalid scheme '{scheme}'.")
    # hostname is lowercased too, take the host as written.
    hostinfo = parts.netloc.rpartition('@')[2]
    if hostinfo.startswith('['):
        host = hostinfo[1:].partition(']')[0]
    else:
        host = hostinfo.partition(':')[0]

    if not host:
        raise ValueError(f"Proxy address '{proxy}' has no host.")
    if port is None:
        raise ValueError(f"Proxy address '{proxy}' has no port.")

    address = ProxyAddress(scheme=scheme, host=host, port=port)
    if urlunsplit((scheme or '', address.netloc, '', '', '')) != uri_string:
        raise ValueError(f"Invalid proxy address '{proxy}'.")
    return address
