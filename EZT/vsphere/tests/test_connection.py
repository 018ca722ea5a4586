#!/usr/bin/env python
#
# test_connection.py - Unit test cases for vSphere session handling
#
# October 2026
# Copyright (c) 2026 the EZT project developers.
# See the COPYRIGHT.txt file at the top-level directory of this distribution.
#
# This file is part of the EZT (Eager-Zeroed Thick disk) project.
# It is subject to the license terms in the LICENSE.txt file found in the
# top-level directory of this distribution. No part of EZT, including this
# file, may be copied, modified, propagated, or distributed except according
# to the terms contained in the LICENSE.txt file.

"""Unit test cases for EZT.vsphere.connection module."""

import ssl

import mock
import requests
from pyVmomi import vim
from verboselogs import NOTICE

from EZT.data_validation import InvalidInputError
from EZT.tests import EZTTestCase
from EZT.ui import UI
from EZT.vsphere.connection import (
    DatastoreRef, SmarterConnection, find_datastore, find_object, find_vm,
)


class TestSmarterConnection(EZTTestCase):
    """Test cases for SmarterConnection class."""

    BAD_CERTIFICATE = {
        'levelname': 'WARNING',
        'msg': "certificate verify failed",
    }

    def setUp(self):
        """Test case setup function called automatically before each test."""
        super(TestSmarterConnection, self).setUp()
        self.ui = UI()
        self.connection = SmarterConnection(self.ui, "localhost",
                                            "admin", "passwd")

    @mock.patch('ssl._create_default_https_context')
    @mock.patch('EZT.vsphere.connection.SmartConnection.__enter__')
    def test_ssl_failure(self, mock_parent, *_):
        """An unverified certificate can be accepted by the user."""
        mock_parent.side_effect = vim.fault.HostConnectFault(
            msg="certificate verify failed")
        # Try twice - first time with default behavior encounters certificate
        # failure, second time (with self-signed certificates accepted)
        # encounters the same error again and raises it
        with self.assertRaises(vim.fault.HostConnectFault):
            with self.connection:
                pass
        self.assertEqual(mock_parent.call_count, 2)
        self.assertLogged(**self.BAD_CERTIFICATE)
        self.assertIs(ssl._create_default_https_context,
                      ssl._create_unverified_context)

    @mock.patch('ssl._create_default_https_context')
    @mock.patch('EZT.vsphere.connection.SmartConnection.__enter__')
    def test_ssl_failure_accepted(self, mock_parent, *_):
        """Once the certificate is accepted, the session proceeds."""
        mock_si = mock.Mock(name='si')
        mock_parent.side_effect = [
            ssl.SSLError(1, "[SSL: CERTIFICATE_VERIFY_FAILED] "
                         "certificate verify failed (_ssl.c:1056)"),
            mock_si,
        ]
        with mock.patch('EZT.vsphere.connection.SmartConnection.__exit__'):
            with self.connection as si:
                self.assertIs(si, mock_si)
        self.assertLogged(**self.BAD_CERTIFICATE)

    @mock.patch('EZT.vsphere.connection.SmartConnection.__enter__')
    def test_ssl_failure_declined(self, mock_parent):
        """If the user declines the certificate, we abort."""
        mock_parent.side_effect = vim.fault.HostConnectFault(
            msg="certificate verify failed")
        self.ui.default_confirm_response = False
        with self.assertRaises(SystemExit):
            with self.connection:
                pass
        self.assertEqual(mock_parent.call_count, 1)
        self.assertLogged(**self.BAD_CERTIFICATE)

    @mock.patch('EZT.vsphere.connection.SmartConnection.__enter__')
    def test_other_hostconnectfault(self, mock_parent):
        """A HostConnectFault other than SSL failure is not retried."""
        mock_parent.side_effect = vim.fault.HostConnectFault(
            msg="Malformed response while querying for local ticket: foo")
        with self.assertRaises(vim.fault.HostConnectFault):
            with self.connection:
                pass
        self.assertEqual(mock_parent.call_count, 1)

    @mock.patch('EZT.vsphere.connection.SmartConnection.__enter__')
    def test_connectionerror(self, mock_parent):
        """Generic ConnectionError gets a more helpful message."""
        mock_parent.side_effect = requests.exceptions.ConnectionError
        with self.assertRaises(requests.exceptions.ConnectionError) as cm:
            with self.connection:
                pass
        self.assertEqual(cm.exception.errno, None)
        self.assertEqual(cm.exception.strerror,
                         "Error connecting to localhost:443: None")

    @mock.patch('EZT.vsphere.connection.SmartConnection.__enter__')
    def test_connectionerror_refused(self, mock_parent):
        """The innermost errno is surfaced from a ConnectionError."""
        mock_parent.side_effect = requests.exceptions.ConnectionError(
            IOError(Exception('Connection aborted.',
                              IOError(61, 'Connection refused'))))
        connection = SmarterConnection(self.ui, "vcenter", "admin",
                                       "passwd", port=8443)
        with self.assertRaises(requests.exceptions.ConnectionError) as cm:
            with connection:
                pass
        self.assertEqual(cm.exception.errno, 61)
        self.assertEqual(cm.exception.strerror,
                         "Error connecting to vcenter:8443: "
                         "Connection refused")

    @mock.patch('EZT.vsphere.connection.SmartConnection.__exit__')
    @mock.patch('EZT.vsphere.connection.SmartConnection.__enter__')
    def test_session_failed(self, mock_enter, mock_exit):
        """Errors raised during a session are logged and propagated."""
        with self.assertRaises(LookupError):
            with self.connection:
                raise LookupError("oops")
        self.assertEqual(mock_enter.call_count, 1)
        self.assertEqual(mock_exit.call_count, 1)
        self.assertLogged(**self.SESSION_FAILED)

    @mock.patch('EZT.vsphere.connection.SmartConnection.__exit__')
    @mock.patch('EZT.vsphere.connection.SmartConnection.__enter__')
    def test_session_input_error(self, mock_enter, mock_exit):
        """Input errors raised during a session propagate without an ERROR."""
        with self.assertRaises(InvalidInputError):
            with self.connection:
                raise InvalidInputError("No VM named 'myvm' was found")
        self.assertEqual(mock_exit.call_count, 1)
        self.assertEqual(self.logging_handler.logs(msg="Session failed"), [])
        self.assertNoLogsOver(NOTICE)

    def test_unwrap_connection_error_27(self):
        """Unwrap an error like a ConnectionError raised by requests 2.7."""
        errnum, inner_message = SmarterConnection.unwrap_connection_error(
            IOError(
                Exception(
                    'Connection aborted.',
                    IOError(61, 'Connection refused')
                )
            )
        )
        self.assertEqual(errnum, 61)
        self.assertEqual(inner_message, "Connection refused")

    class MaxRetryError(Exception):
        """Mock of urllib3 MaxRetryError exception class."""

        def __init__(self, pool, url, reason):
            """Create fake exception."""
            self.pool = pool
            self.url = url
            self.reason = reason
            message = ("Max retries exceeded with url: %s (Caused by %r)"
                       % (url, reason))
            super(TestSmarterConnection.MaxRetryError, self).__init__(
                "%s: %s" % (pool, message))

    class NewConnectionError(Exception):
        """Mock of urllib3 NewConnectionError exception class."""

        def __init__(self, pool, message):
            """Create fake exception."""
            self.pool = pool
            super(TestSmarterConnection.NewConnectionError, self).__init__(
                message)

    def test_unwrap_connection_error_urllib3(self):
        """Unwrap an error like a ConnectionError wrapping urllib3's."""
        errnum, inner_message = SmarterConnection.unwrap_connection_error(
            self.MaxRetryError(
                pool="HTTPSConnectionPool(host='localhost', port=443)",
                url="//sdk/vimServiceVersions.xml",
                reason=self.NewConnectionError(
                    pool="HTTPSConnection",
                    message="Failed to establish a new connection: "
                    "[Errno 61] Connection refused")
            )
        )
        self.assertEqual(errnum, None)
        self.assertEqual(inner_message,
                         "Failed to establish a new connection: "
                         "[Errno 61] Connection refused")

    def test_unwrap_connection_error_empty(self):
        """Nothing to unwrap."""
        self.assertEqual(SmarterConnection.unwrap_connection_error(
            requests.exceptions.ConnectionError()), (None, None))


class TestFindObject(EZTTestCase):
    """Test cases for inventory lookup functions."""

    @staticmethod
    def named(name):
        """Create a stand-in for a managed entity with the given name."""
        entity = mock.Mock()
        entity.name = name
        return entity

    def setUp(self):
        """Test case setup function called automatically before each test."""
        super(TestFindObject, self).setUp()
        self.si = mock.Mock(name='si')
        content = self.si.RetrieveContent.return_value
        self.container = content.viewManager.CreateContainerView.return_value
        self.view_manager = content.viewManager
        self.root_folder = content.rootFolder

    def test_find_object(self):
        """The container view is searched by exact name, then destroyed."""
        vm1 = self.named("myvm")
        vm2 = self.named("myvm2")
        self.container.view = [vm1, vm2]
        self.assertIs(find_object(self.si, vim.VirtualMachine, "myvm2"), vm2)
        self.view_manager.CreateContainerView.assert_called_once_with(
            self.root_folder, [vim.VirtualMachine], True)
        self.container.Destroy.assert_called_once_with()

        self.assertEqual(find_object(self.si, vim.VirtualMachine, "MyVM"),
                         None)
        self.assertEqual(self.container.Destroy.call_count, 2)

    def test_find_vm(self):
        """Find a VM or complain that there is none."""
        vm = self.named("myvm")
        self.container.view = [self.named("other"), vm]
        self.assertIs(find_vm(self.si, "myvm"), vm)
        with self.assertRaises(InvalidInputError) as catcher:
            find_vm(self.si, "nosuchvm")
        self.assertEqual(str(catcher.exception),
                         "No VM named 'nosuchvm' was found on the server")

    def test_find_datastore(self):
        """Find a datastore or complain that there is none."""
        datastore = self.named("ds0")
        self.container.view = [datastore]
        self.assertEqual(find_datastore(self.si, "ds0"),
                         DatastoreRef("ds0", datastore))
        self.view_manager.CreateContainerView.assert_called_with(
            self.root_folder, [vim.Datastore], True)
        self.assertRaises(InvalidInputError,
                          find_datastore, self.si, "ds1")
