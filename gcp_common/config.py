# Copyright 2023 - Greg Hecht - All Rights Reserved
# Licensed to Sola Insurance, all modifications and reuse permitted within that organization.

import logging
import os
import google.auth

from dataclasses import dataclass
from google.auth.exceptions import DefaultCredentialsError
from typing import Mapping, Optional

from gcp_common.gcs_path import GcsPath
from gcp_common.proxy import parse_proxy_address

"""Configuration of a Cloud Storage sink.

The project and the service account file can be set to `auto-detect`, in which case they are resolved from the
environment the same way the Google Cloud libraries do it (GOOGLE_APPLICATION_CREDENTIALS, gcloud, metadata server).

When building the config from the environment, these variables are read:
   * GCP_PROJECT - Project id, default `auto-detect`.
   * GCS_PATH - Destination path, `gs://<bucket>/<path>`.
   * GCP_SERVICE_ACCOUNT_FILE - Path to a service account key file, default `auto-detect`.
   * GCP_PROXY - Optional HTTP proxy, `host:port` or `http://host:port`.
"""

AUTO_DETECT = 'auto-detect'


@dataclass
class GCSSinkConfig:
    project: Optional[str] = AUTO_DETECT
    path: Optional[str] = None
    service_account_file_path: Optional[str] = AUTO_DETECT
    proxy: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = None) -> 'GCSSinkConfig':
        environ = os.environ if environ is None else environ
        return cls(
            project=environ.get('GCP_PROJECT', AUTO_DETECT),
            path=environ.get('GCS_PATH'),
            service_account_file_path=environ.get('GCP_SERVICE_ACCOUNT_FILE', AUTO_DETECT),
            proxy=environ.get('GCP_PROXY') or None,
        )

    def get_project(self) -> str:
        """Returns the configured project, or detects it from the environment.

        :raises ValueError: If the project is set to auto-detect and it can't be determined.
        """
        if self.project and self.project != AUTO_DETECT:
            return self.project

        try:
            _, project = google.auth.default()
        except DefaultCredentialsError as e:
            raise ValueError(f'Could not detect Google Cloud project id from the environment: {e}') from e
        if not project:
            raise ValueError('Could not detect Google Cloud project id from the environment. '
                             'Please specify a project id.')
        logging.debug(f'Detected Google Cloud project {project}')
        return project

    def get_service_account_file_path(self) -> Optional[str]:
        if not self.service_account_file_path or self.service_account_file_path == AUTO_DETECT:
            return None
        return self.service_account_file_path

    def get_path(self) -> Optional[str]:
        return self.path

    def validate(self):
        """Check that the path and proxy can be parsed, raising a ValueError if not."""
        GcsPath.from_path(self.path or '')
        parse_proxy_address(self.proxy)
