# Copyright 2023 - Greg Hecht - All Rights Reserved
# Licensed to Sola Insurance, all modifications and reuse permitted within that organization.

import json
import os
import tempfile
import unittest

from gcp_common.credentials import Credentials, ProxiedCredentials
from gcp_common.transport import HttpTransportFactory
from google.auth import credentials as auth_credentials
from unittest import mock
from unittest.mock import patch

SERVICE_ACCOUNT_INFO = {
    'type': 'service_account',
    'project_id': 'fake-project',
    'client_email': 'fake@fake-project.iam.gserviceaccount.com',
    'token_uri': 'https://oauth2.googleapis.com/token',
}


class CredentialsTestCase(unittest.TestCase):
    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.missing_path = os.path.join(self.tmp_dir.name, 'missing.json')

    def tearDown(self):
        self.tmp_dir.cleanup()

    def _write(self, content: str) -> str:
        path = os.path.join(self.tmp_dir.name, 'key.json')
        with open(path, 'w') as file_obj:
            file_obj.write(content)
        return path

    @patch('gcp_common.credentials.service_account.Credentials.from_service_account_info')
    def test_load_without_proxy(self, from_service_account_info):
        path = self._write(json.dumps(SERVICE_ACCOUNT_INFO))
        credentials = Credentials.load_service_account_credentials(path)
        self.assertIs(from_service_account_info.return_value, credentials)
        from_service_account_info.assert_called_once_with(SERVICE_ACCOUNT_INFO)

    @patch('gcp_common.credentials.service_account.Credentials.from_service_account_info')
    def test_load_with_proxy_and_factory(self, from_service_account_info):
        path = self._write(json.dumps(SERVICE_ACCOUNT_INFO))
        transport_factory = mock.Mock(spec=HttpTransportFactory)
        credentials = Credentials.load_service_account_credentials(path, 'proxy.internal:3128', transport_factory)
        self.assertIsInstance(credentials, ProxiedCredentials)
        self.assertIs(from_service_account_info.return_value, credentials.wrapped)
        self.assertIs(transport_factory, credentials.transport_factory)

    @patch('gcp_common.credentials.service_account.Credentials.from_service_account_info')
    def test_load_with_proxy_builds_factory(self, from_service_account_info):
        path = self._write(json.dumps(SERVICE_ACCOUNT_INFO))
        credentials = Credentials.load_service_account_credentials(path, 'http://proxy.internal:3128')
        self.assertEqual('http://proxy.internal:3128', credentials.transport_factory.proxy.url)

    def test_load_missing_file(self):
        with self.assertRaises(IOError):
            Credentials.load_service_account_credentials(self.missing_path)

    def test_load_missing_file_with_proxy(self):
        transport_factory = mock.Mock(spec=HttpTransportFactory)
        with self.assertRaises(IOError):
            Credentials.load_service_account_credentials(self.missing_path, 'proxy.internal:3128', transport_factory)

    def test_load_missing_file_before_proxy_check(self):
        """A missing file is reported even when the proxy itself is empty or invalid."""
        for proxy in ['', 'host', 'ftp://host:1234']:
            with self.subTest(proxy=proxy):
                with self.assertRaises(IOError):
                    Credentials.load_service_account_credentials(self.missing_path, proxy)

    @patch('gcp_common.credentials.service_account.Credentials.from_service_account_info')
    def test_load_invalid_proxy(self, from_service_account_info):
        path = self._write(json.dumps(SERVICE_ACCOUNT_INFO))
        with self.assertRaisesRegex(ValueError, 'has invalid scheme'):
            Credentials.load_service_account_credentials(path, 'ftp://proxy.internal:3128')

    def test_load_invalid_json(self):
        path = self._write('not json')
        with self.assertRaisesRegex(IOError, 'Unable to load service account credentials'):
            Credentials.load_service_account_credentials(path)

    def test_load_not_an_object(self):
        path = self._write(json.dumps(['not', 'an', 'object']))
        with self.assertRaises(IOError):
            Credentials.load_service_account_credentials(path)

    def test_load_missing_fields(self):
        path = self._write(json.dumps({'type': 'service_account'}))
        with self.assertRaises(IOError) as context:
            Credentials.load_service_account_credentials(path)
        self.assertIsInstance(context.exception.__cause__, ValueError)


class ProxiedCredentialsTestCase(unittest.TestCase):
    def setUp(self):
        self.wrapped = mock.Mock()
        self.transport_factory = mock.Mock(spec=HttpTransportFactory)
        self.credentials = ProxiedCredentials(self.wrapped, self.transport_factory)

    def test_is_google_auth_credentials(self):
        self.assertIsInstance(self.credentials, auth_credentials.Credentials)
        self.assertIsInstance(self.credentials, auth_credentials.Scoped)

    def test_refresh_uses_factory_transport(self):
        caller_request = mock.Mock()
        self.credentials.refresh(caller_request)
        self.wrapped.refresh.assert_called_once_with(self.transport_factory.auth_request.return_value)
        self.assertIs(self.wrapped.token, self.credentials.token)
        self.assertIs(self.wrapped.expiry, self.credentials.expiry)

    def test_with_scopes_keeps_factory(self):
        scoped = self.credentials.with_scopes(['fake-scope'])
        self.assertIsInstance(scoped, ProxiedCredentials)
        self.assertIs(self.wrapped.with_scopes.return_value, scoped.wrapped)
        self.assertIs(self.transport_factory, scoped.transport_factory)
        self.wrapped.with_scopes.assert_called_once_with(['fake-scope'], default_scopes=None)

    def test_delegates_to_wrapped(self):
        self.assertIs(self.wrapped.requires_scopes, self.credentials.requires_scopes)
        self.assertIs(self.wrapped.project_id, self.credentials.project_id)
        self.assertIs(self.wrapped.service_account_email, self.credentials.service_account_email)
        self.assertIs(self.wrapped.quota_project_id, self.credentials.quota_project_id)


if __name__ == '__main__':
    unittest.main()
