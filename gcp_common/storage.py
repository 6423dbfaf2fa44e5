# Copyright 2023 - Greg Hecht - All Rights Reserved
# Licensed to Sola Insurance, all modifications and reuse permitted within that organization.

import logging

from google.cloud import storage
from typing import Any, Optional

from gcp_common.transport import HttpTransportFactory, create_http_transport_factory


class Storage:
    """Wrapper class around the construction of Google Cloud Storage clients.

        Usage:
        ```
            project_id = ...
            client = Storage.client(project_id=project_id)  # Optionally, pass credentials and a proxy too.
            bucket = client.bucket('my-bucket')
        ```
    """

    @staticmethod
    def client(project_id: str = None,
               credentials: Any = None,
               proxy: Optional[str] = None,
               transport_factory: Optional[HttpTransportFactory] = None) -> storage.Client:
        """Creates and returns a new client for accessing the Cloud Storage service.

        See:
        https://cloud.google.com/python/docs/reference/storage/latest/google.cloud.storage.client.Client

        :param project_id: Name of the project the client works in. If not provided, the project is inferred from
        the environment.
        :param credentials: An instance of Google Cloud credentials, to authenticate the client. If not provided, the
        storage client may instantiate its own credentials, inferred from the environment.
        :param proxy: Optional proxy string. If set, all requests of the client go through the proxy.
        :param transport_factory: Factory for the proxied transports, created from the proxy if not provided.
        :returns: A Cloud Storage Client. The caller is responsible for closing it.
        """
        if proxy is None:
            return storage.Client(project=project_id, credentials=credentials)

        if transport_factory is None:
            transport_factory = create_http_transport_factory(None, proxy)
        logging.debug(f'Creating storage client for project {project_id} through proxy {proxy}')
        http = transport_factory.authorized_session(credentials, storage.Client.SCOPE)
        return storage.Client(project=project_id, credentials=credentials, _http=http)
