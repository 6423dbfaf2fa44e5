# Copyright 2023 - Greg Hecht - All Rights Reserved
# Licensed to Sola Insurance, all modifications and reuse permitted within that organization.

import logging

from google.cloud import bigquery
from typing import Any, Optional

from gcp_common.transport import HttpTransportFactory, create_http_transport_factory


class Bigquery:
    """Wrapper class around the construction of Google Bigquery clients.

        Usage:
        ```
            # Generate a Google API client. You can then use that client's APIs directly.
            project_id = ...
            client = Bigquery.client(project_id=project_id)  # Optionally, pass credentials and a proxy too.
        ```
    """

    @staticmethod
    def client(project_id: str = None,
               credentials: Any = None,
               proxy: Optional[str] = None,
               transport_factory: Optional[HttpTransportFactory] = None) -> bigquery.Client:
        """Creates and returns a new client for accessing the Bigquery service.

        See:
        https://cloud.google.com/python/docs/reference/bigquery/latest/google.cloud.bigquery.client.Client

        :param project_id: Name of the project running the queries. If not provided, the project is inferred
        from the environment.
        :param credentials: An instance of Google Cloud credentials, to authenticate the client. If not provided, the
        bigquery client may instantiate its own credentials, inferred from the environemnt.
        :param proxy: Optional proxy string. If set, all requests of the client go through the proxy.
        :param transport_factory: Factory for the proxied transports, created from the proxy if not provided.
        :returns: A Bigquery Client. The caller is responsible for closing it.
        """
        if proxy is None:
            return bigquery.Client(project=project_id, credentials=credentials)

        if transport_factory is None:
            transport_factory = create_http_transport_factory(None, proxy)
        logging.debug(f'Creating bigquery client for project {project_id} through proxy {proxy}')
        http = transport_factory.authorized_session(credentials, bigquery.Client.SCOPE)
        return bigquery.Client(project=project_id, credentials=credentials, _http=http)
