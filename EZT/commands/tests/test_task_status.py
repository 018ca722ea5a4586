#!/usr/bin/env python
#
# test_task_status.py - Unit test cases for the 'ezt task-status' command
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

"""Unit test cases for EZT.commands.task_status module."""

import mock
from pyVmomi import vmodl

from EZT.commands.task_status import EZTTaskStatus
from EZT.data_validation import InvalidInputError
from EZT.tests import EZTTestCase
from EZT.ui import UI
from EZT.vsphere.errors import ProvisioningFailedError
from EZT.vsphere.tasks import ProgressReporter, TaskStatus


@mock.patch('EZT.vsphere.tasks.TaskTracker.await_completion',
            return_value="done")
@mock.patch('EZT.vsphere.tasks.TaskTracker.refresh_status')
@mock.patch('EZT.commands.command.SmarterConnection')
class TestEZTTaskStatus(EZTTestCase):
    """Test cases for EZTTaskStatus class."""

    def setUp(self):
        """Test case setup function called automatically before each test."""
        super(TestEZTTaskStatus, self).setUp()
        self.instance = EZTTaskStatus(UI())
        self.instance.server = "vcenter"
        self.instance.username = "admin"
        self.instance.password = "passwd"
        self.instance.task_id = "task-12"

    def test_not_ready_with_no_args(self, *_):
        """Test ready_to_run() behavior."""
        self.instance = EZTTaskStatus(UI())
        ready, reason = self.instance.ready_to_run()
        self.assertEqual(ready, False)
        self.assertRegex(reason, "TASK_ID is a mandatory argument")
        self.assertRaises(InvalidInputError, self.instance.run)

        self.instance.task_id = "task-12"
        ready, reason = self.instance.ready_to_run()
        self.assertEqual(ready, False)
        self.assertRegex(reason, "SERVER is a mandatory argument")

    def test_invalid_task_id(self, *_):
        """Task IDs must look like managed object IDs."""
        with self.assertRaises(InvalidInputError):
            self.instance.task_id = "task 12"
        self.assertEqual(self.instance.task_id, "task-12")

    def test_running(self, mock_conn, mock_refresh, mock_await):
        """Report a task that is still in progress."""
        mock_refresh.return_value = TaskStatus('running', 40, None, None)
        si = mock_conn.return_value.__enter__.return_value
        self.check_output("Task task-12: running (40% complete)")
        mock_await.assert_not_called()

        (task,), _ = mock_refresh.call_args
        self.assertEqual(task._moId, "task-12")
        self.assertIs(task._stub, si._stub)

    def test_success(self, mock_conn, mock_refresh, mock_await):
        """Report a task that has finished."""
        mock_refresh.return_value = TaskStatus('success', 100, None, None)
        self.instance.wait = True
        self.check_output("Task task-12: success (100% complete)")
        mock_await.assert_not_called()

    def test_wait(self, mock_conn, mock_refresh, mock_await):
        """Wait for a running task to finish."""
        mock_refresh.return_value = TaskStatus('queued', 0, None, None)
        self.instance.wait = True
        self.check_output("Task task-12: success (100% complete)")
        mock_await.assert_called_once_with(mock.ANY, 'disk',
                                           on_progress=mock.ANY)
        (_args, kwargs) = mock_await.call_args
        self.assertIsInstance(kwargs['on_progress'], ProgressReporter)
        self.assertEqual(self.instance.status.result, "done")

    def test_wait_failed(self, mock_conn, mock_refresh, mock_await):
        """A task failing while we wait is reported as an error."""
        mock_refresh.return_value = TaskStatus('running', 10, None, None)
        mock_await.side_effect = ProvisioningFailedError('disk', "X")
        self.instance.wait = True
        with self.assertRaises(ProvisioningFailedError) as catcher:
            self.instance.run()
        self.assertEqual(catcher.exception.message, "X")

    def test_failed(self, mock_conn, mock_refresh, mock_await):
        """A failed task is reported as an error."""
        mock_refresh.return_value = TaskStatus('error', 30, "X", None)
        with self.assertRaises(ProvisioningFailedError) as catcher:
            self.instance.run()
        self.assertEqual(str(catcher.exception), "disk stage failed: X")
        # The state is still available to report
        self.assertEqual(self.instance.status.progress, 30)

    def test_not_found(self, mock_conn, mock_refresh, mock_await):
        """An unknown task is invalid input."""
        mock_refresh.side_effect = vmodl.fault.ManagedObjectNotFound()
        with self.assertRaises(InvalidInputError) as catcher:
            self.instance.run()
        self.assertEqual(str(catcher.exception),
                         "No task 'task-12' was found on vcenter")
