# Copyright 2023 - Greg Hecht - All Rights Reserved
# Licensed to Sola Insurance, all modifications and reuse permitted within that organization.

from typing import NamedTuple

ROOT_DIR = '/'
SCHEME = 'gs://'
SCHEME_SEPARATOR = '://'


class GcsPath(NamedTuple):
    """A Cloud Storage location, split into its bucket and object name.

    Paths may be written as `gs://bucket/object`, `/bucket/object` or `bucket/object`. The object name is empty when
    the path only names a bucket.
    """
    uri: str
    bucket: str
    name: str

    @property
    def is_bucket(self) -> bool:
        return not self.name

    @classmethod
    def from_path(cls, path: str) -> 'GcsPath':
        """Parse the given path.

        :raises ValueError: If the path is empty, uses another scheme than gs://, or names no bucket.
        """
        if not path:
            raise ValueError("GCS path can not be empty. The path must be of form 'gs://<bucket-name>/path'.")

        if path.startswith(SCHEME):
            path = path[len(SCHEME):]
        elif path.startswith(ROOT_DIR):
            path = path[len(ROOT_DIR):]
        elif SCHEME_SEPARATOR in path and ROOT_DIR not in path.partition(SCHEME_SEPARATOR)[0]:
            raise ValueError(f"Invalid GCS path '{path}'. The path must be of form 'gs://<bucket-name>/path'.")

        bucket, _, name = path.partition(ROOT_DIR)
        if not bucket:
            raise ValueError("GCS bucket name can not be empty. The path must be of form 'gs://<bucket-name>/path'.")
        return cls(uri=f'{SCHEME}{bucket}{ROOT_DIR}{name}', bucket=bucket, name=name)
