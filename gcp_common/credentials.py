# Copyright 2023 - Greg Hecht - All Rights Reserved
# Licensed to Sola Insurance, all modifications and reuse permitted within that organization.

import json
import logging

from google.auth import credentials as auth_credentials
from google.oauth2 import service_account
from typing import Optional, Sequence, Union

from gcp_common.transport import HttpTransportFactory, create_http_transport_factory


class ProxiedCredentials(auth_credentials.Scoped, auth_credentials.Credentials):
    """Credentials that always refresh their token through a proxy.

    google-auth hands credentials whatever transport the calling client happens to use. This wrapper ignores it and
    refreshes the wrapped credentials through the transport factory, so the token requests go through the same proxy
    as the API calls.
    """

    def __init__(self, wrapped: auth_credentials.Credentials, transport_factory: HttpTransportFactory):
        super().__init__()
        self.wrapped = wrapped
        self.transport_factory = transport_factory

    def refresh(self, request):
        self.wrapped.refresh(self.transport_factory.auth_request())
        self.token = self.wrapped.token
        self.expiry = self.wrapped.expiry

    @property
    def requires_scopes(self) -> bool:
        return getattr(self.wrapped, 'requires_scopes', False)

    @property
    def scopes(self):
        return getattr(self.wrapped, 'scopes', None)

    def with_scopes(self, scopes: Sequence[str], default_scopes: Sequence[str] = None) -> 'ProxiedCredentials':
        scoped = self.wrapped.with_scopes(scopes, default_scopes=default_scopes)
        return ProxiedCredentials(scoped, self.transport_factory)

    @property
    def project_id(self) -> Optional[str]:
        return getattr(self.wrapped, 'project_id', None)

    @property
    def service_account_email(self) -> Optional[str]:
        return getattr(self.wrapped, 'service_account_email', None)

    @property
    def quota_project_id(self) -> Optional[str]:
        return self.wrapped.quota_project_id

    @property
    def universe_domain(self) -> str:
        return self.wrapped.universe_domain


class Credentials:
    """Utility class for building credentials for accessing Google Cloud services.

    Using this class isn't strictly necessary. Consider it an "advanced" mode if you have multiple credentials files
    for different service accounts and therefore can't use the GOOGLE_APPLICATION_CREDENTIALS flag, or if the
    services have to be reached through a proxy. Instead, you can use this to explicitly create a Credentials from
    each file.

    Example usage:
    ```
        project_id = ...
        specific_credentials_file = ...
        credentials = Credentials.load_service_account_credentials(specific_credentials_file)
        bigquery_client = Bigquery.client(project_id=project_id, credentials=credentials)
    ```
    """

    @staticmethod
    def load_service_account_credentials(
            path: str,
            proxy: Optional[str] = None,
            transport_factory: Optional[HttpTransportFactory] = None
    ) -> Union[service_account.Credentials, ProxiedCredentials]:
        """Load credentials from the service account key file at the given path.

        :param path: Path to a service account JSON key file.
        :param proxy: Optional proxy string. If set, the credentials refresh their tokens through the proxy.
        :param transport_factory: Factory for the proxied transports. If a proxy is set but no factory is provided,
            one is created from the proxy.
        :returns: Credentials which can be passed to the client constructors.
        :raises IOError: If the file can't be read or isn't a valid service account key.
        :raises ValueError: If the proxy is invalid.
        """
        with open(path, 'r') as file_obj:
            try:
                info = json.load(file_obj)
            except ValueError as e:
                raise IOError(f"Unable to load service account credentials from '{path}'.") from e

        if not isinstance(info, dict):
            raise IOError(f"Unable to load service account credentials from '{path}', expected a JSON object.")
        try:
            credentials = service_account.Credentials.from_service_account_info(info)
        except ValueError as e:
            raise IOError(f"Unable to load service account credentials from '{path}'.") from e

        if proxy is None:
            logging.debug(f'Loaded service account credentials from {path}')
            return credentials

        if transport_factory is None:
            transport_factory = create_http_transport_factory(path, proxy)
        logging.debug(f'Loaded service account credentials from {path}, refreshing through proxy {proxy}')
        return ProxiedCredentials(credentials, transport_factory)
