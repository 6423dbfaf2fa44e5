# Copyright 2023 - Greg Hecht - All Rights Reserved
# Licensed to Sola Insurance, all modifications and reuse permitted within that organization.

import logging
import google.auth
import google.auth.credentials
import requests

from google.auth.transport.requests import AuthorizedSession, Request
from typing import Dict, Optional, Sequence

from gcp_common.proxy import ProxyAddress, parse_proxy_address


class HttpTransportFactory:
    """Builds HTTP transports that send all of their traffic through a single proxy.

    The Google Cloud python libraries are built on `requests`. google-auth refreshes tokens through a
    `google.auth.transport.requests.Request`, and the storage and bigquery clients accept an already authorized
    `requests.Session` as their `_http`. This factory produces both, routed through the proxy it was created with.

    Usage:
    ```
        factory = create_http_transport_factory(key_file, 'proxy.internal:3128')
        credentials = Credentials.load_service_account_credentials(key_file, proxy, factory)
        client = Storage.client(project_id, credentials, proxy, factory)
    ```
    """

    def __init__(self, proxy: ProxyAddress):
        if proxy is None:
            raise ValueError('An HTTP transport factory requires a proxy address.')
        self.proxy = proxy

    @property
    def proxies(self) -> Dict[str, str]:
        return {'http': self.proxy.url, 'https': self.proxy.url}

    def create(self) -> requests.Session:
        """Creates and returns a new session routed through the proxy."""
        session = requests.Session()
        return self._route(session)

    def auth_request(self) -> Request:
        """Creates and returns a google-auth transport routed through the proxy, used for refreshing tokens."""
        return Request(session=self.create())

    def authorized_session(self,
                           credentials: Optional[google.auth.credentials.Credentials],
                           scopes: Optional[Sequence[str]] = None) -> AuthorizedSession:
        """Creates a session which authorizes each request with the given credentials, routed through the proxy.

        :param credentials: Credentials to authorize requests with. If not provided, the credentials are inferred from
            the environment.
        :param scopes: OAuth scopes the credentials are narrowed to, if they require scopes.
        :returns: An AuthorizedSession, which can be passed as the `_http` of a Google Cloud client.
        """
        if credentials is None:
            credentials, _ = google.auth.default(scopes=scopes, request=self.auth_request())
        else:
            credentials = google.auth.credentials.with_scopes_if_required(credentials, scopes)
        session = AuthorizedSession(credentials, auth_request=self.auth_request())
        return self._route(session)

    def _route(self, session: requests.Session) -> requests.Session:
        # HTTP_PROXY and HTTPS_PROXY from the environment would otherwise take precedence over session.proxies.
        session.trust_env = False
        session.proxies.update(self.proxies)
        return session


def create_http_transport_factory(path: Optional[str], proxy: Optional[str]) -> HttpTransportFactory:
    """Validate the proxy and return a factory for transports routed through it.

    :param path: Path to the service account file the transports are used with. Unused, accepted so callers can pass
        the same arguments here and to the credential loader.
    :param proxy: Proxy string like `host:port` or `http://host:port`.
    :raises ValueError: If the proxy is missing or invalid.
    """
    address = parse_proxy_address(proxy)
    if address is None:
        raise ValueError(f"Proxy address '{proxy}' is empty, an HTTP transport factory requires a proxy.")
    logging.debug(f'Creating HTTP transport factory for proxy {address.url}')
    return HttpTransportFactory(address)
