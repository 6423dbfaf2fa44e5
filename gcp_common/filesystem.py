# Copyright 2023 - Greg Hecht - All Rights Reserved
# Licensed to Sola Insurance, all modifications and reuse permitted within that organization.

from typing import Dict

from gcp_common.config import GCSSinkConfig
from gcp_common.gcs_path import ROOT_DIR, GcsPath

"""Properties for the Hadoop `gs://` filesystem adapter (the Cloud Storage connector).

See:
https://github.com/GoogleCloudDataproc/hadoop-connectors/blob/master/gcs/CONFIGURATION.md
"""

SERVICE_ACCOUNT_KEYFILE = 'google.cloud.auth.service.account.json.keyfile'
FS_IMPL = 'fs.gs.impl'
ABSTRACT_FS_IMPL = 'fs.AbstractFileSystem.gs.impl'
PROJECT_ID = 'fs.gs.project.id'
SYSTEM_BUCKET = 'fs.gs.system.bucket'
PATH_ENCODING = 'fs.gs.path.encoding'
WORKING_DIR = 'fs.gs.working.dir'
DISABLE_CACHE = 'fs.gs.impl.disable.cache'

GOOGLE_HADOOP_FILE_SYSTEM = 'com.google.cloud.hadoop.fs.gcs.GoogleHadoopFileSystem'
GOOGLE_HADOOP_FS = 'com.google.cloud.hadoop.fs.gcs.GoogleHadoopFS'
PATH_ENCODING_URI_PATH = 'uri-path'


def get_file_system_properties(config: GCSSinkConfig) -> Dict[str, str]:
    """Build the filesystem properties for writing to the bucket of the given sink config.

    :param config: Sink config, providing the project, the destination path and optionally a service account file.
    :returns: Flat dict of property name to value.
    :raises ValueError: If the configured path doesn't name a bucket.
    """
    properties = {}
    service_account_file_path = config.get_service_account_file_path()
    if service_account_file_path is not None:
        properties[SERVICE_ACCOUNT_KEYFILE] = service_account_file_path
    properties[FS_IMPL] = GOOGLE_HADOOP_FILE_SYSTEM
    properties[ABSTRACT_FS_IMPL] = GOOGLE_HADOOP_FS
    properties[PROJECT_ID] = config.get_project()
    properties[SYSTEM_BUCKET] = GcsPath.from_path(config.get_path()).bucket
    properties[PATH_ENCODING] = PATH_ENCODING_URI_PATH
    properties[WORKING_DIR] = ROOT_DIR
    properties[DISABLE_CACHE] = 'true'
    return properties
