#!/usr/bin/env python
#
# task_status.py - Implements "ezt task-status" command
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

"""Module for checking on a previously submitted server task.

**Classes**

.. autosummary::
  :nosignatures:

  EZTTaskStatus
"""

import argparse
import logging

from pyVmomi import vim, vmodl

from EZT.data_validation import InvalidInputError, managed_object_id
from EZT.vsphere.errors import ProvisioningFailedError
from EZT.vsphere.tasks import ProgressReporter, TaskStatus
from .command import command_classes, RemoteCommand

logger = logging.getLogger(__name__)


class EZTTaskStatus(RemoteCommand):
    """Report on (and optionally wait for) a task by its managed object ID.

    This is the follow-up to ``ezt add-disk --async``.

    Inherited attributes:
    :attr:`~Command.ui`,
    :attr:`~RemoteCommand.server`,
    :attr:`~RemoteCommand.username`,
    :attr:`~RemoteCommand.password`,
    :attr:`~RemoteCommand.port`,
    :attr:`~RemoteCommand.poll_interval`

    Attributes:
    :attr:`task_id`,
    :attr:`wait`
    """

    def __init__(self, ui):
        """Instantiate this command with the given UI.

        Args:
          ui (UI): User interface instance.
        """
        super(EZTTaskStatus, self).__init__(ui)
        self._task_id = None
        self.wait = False
        """Whether to block until the task reaches a terminal state."""
        self.status = None
        """Last :class:`~EZT.vsphere.tasks.TaskStatus` seen by :meth:`run`."""

    @property
    def task_id(self):
        """Managed object ID of the task, such as ``task-1234``.

        Raises:
          InvalidInputError: if not a plausible managed object ID.
        """
        return self._task_id

    @task_id.setter
    def task_id(self, value):
        self._task_id = managed_object_id(value)

    def ready_to_run(self):
        """Check whether the module is ready to :meth:`run`.

        Returns:
          tuple: ``(True, ready_message)`` or ``(False, reason_why_not)``
        """
        if not self.task_id:
            return False, "TASK_ID is a mandatory argument!"
        return super(EZTTaskStatus, self).ready_to_run()

    def run(self):
        """Do the actual work of this command.

        Raises:
          InvalidInputError: if :meth:`ready_to_run` reports ``False``,
              or if the server does not know of this task.
          ProvisioningFailedError: if the task has failed.
          RemoteUnavailableError: if the server cannot be reached.
        """
        super(EZTTaskStatus, self).run()

        tracker = self.tracker()
        with self.connect() as si:
            # pylint: disable=protected-access
            task = vim.Task(self.task_id, stub=si._stub)
            try:
                self.status = tracker.refresh_status(task)
                if self.wait and self.status.state in (
                        vim.TaskInfo.State.queued,
                        vim.TaskInfo.State.running):
                    result = tracker.await_completion(
                        task, 'disk', on_progress=ProgressReporter(
                            "Task {0}".format(self.task_id)))
                    self.status = TaskStatus(vim.TaskInfo.State.success,
                                             100, None, result)
            except vmodl.fault.ManagedObjectNotFound:
                raise InvalidInputError("No task '{0}' was found on {1}"
                                        .format(self.task_id, self.server))
        if self.status.state == vim.TaskInfo.State.error:
            raise ProvisioningFailedError('disk', self.status.error_message)

    def finished(self):
        """Report the task state to the user."""
        if self.status is not None:
            print("Task {0}: {1} ({2}% complete)"
                  .format(self.task_id, self.status.state,
                          self.status.progress))
        super(EZTTaskStatus, self).finished()

    def create_subparser(self):
        """Create 'task-status' CLI subparser."""
        parser = self.ui.add_subparser(
            'task-status',
            add_help=False,
            parents=[self.connection_parser()],
            usage=self.ui.fill_usage("task-status", [
                "SERVER TASK_ID [-u USERNAME] [-p PASSWORD] [--port PORT] \
[-w] [--poll-interval SECONDS]",
            ]),
            help="""Check on a task submitted by 'ezt add-disk --async'""",
            description="""
Report the state and progress of a server task, such as the disk creation
task submitted by 'ezt add-disk --async'. Exits with an error if the task
has failed.""",
            epilog=self.ui.fill_examples([
                ("Wait for task 'task-1234' on server 192.0.2.100 to finish,"
                 " reporting its progress.",
                 'ezt -v task-status 192.0.2.100 task-1234 --wait'),
            ]),
            formatter_class=argparse.RawDescriptionHelpFormatter)

        group = parser.add_argument_group("general options")

        group.add_argument('-h', '--help', action='help',
                           help="""Show this help message and exit""")
        group.add_argument('-w', '--wait', action='store_true',
                           help="""Wait for the task to succeed or fail""")

        parser.add_argument('TASK_ID',
                            help="""Managed object ID of the task""")
        parser.set_defaults(instance=self)


command_classes.append(EZTTaskStatus)
