#!/usr/bin/env python
#
# command.py - Abstract interface for EZT command implementations.
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

"""Parent classes for implementing EZT subcommands.

**Classes**

.. autosummary::
  :nosignatures:

  Command
  RemoteCommand
"""

import argparse
import getpass
import logging

from EZT.data_validation import (
    InvalidInputError, non_negative_float, positive_int, validate_int,
)
from EZT.vsphere.connection import SmarterConnection
from EZT.vsphere.tasks import TASK_POLL_INTERVAL, TaskTracker

logger = logging.getLogger(__name__)

command_classes = []   # pylint: disable=invalid-name
"""Dynamically constructed list of concrete command classes."""


class Command(object):
    """Abstract interface for EZT commands.

    Attributes:
    :attr:`ui`

    .. note :: Commands that talk to a server should subclass
      :class:`RemoteCommand` instead of this class.
    """

    def __init__(self, ui):
        """Instantiate this command with the given UI.

        Args:
          ui (UI): User interface instance.
        """
        self.ui = ui
        """User interface instance (:class:`~EZT.ui.UI` or subclass)."""

    def ready_to_run(self):
        """Check whether the module is ready to :meth:`run`.

        Returns:
          tuple: ``(True, ready_message)`` or ``(False, reason_why_not)``
        """
        return True, "Ready to go!"

    def run(self):
        """Do the actual work of this command.

        Raises:
          InvalidInputError: if :meth:`ready_to_run` reports ``False``
        """
        (ready, reason) = self.ready_to_run()
        if not ready:
            raise InvalidInputError(reason)
        # Do the work now...

    def finished(self):
        """Do any final actions before being destroyed.

        This class does nothing; subclasses may choose to report results.
        """
        pass

    def destroy(self):
        """Release any resources held by this command."""
        pass

    def create_subparser(self):
        """Add subparser for the CLI of this command."""
        pass


class RemoteCommand(Command):
    """Command that connects to a vCenter or ESXi server.

    Inherited attributes:
    :attr:`~Command.ui`

    Attributes:
    :attr:`server`,
    :attr:`username`,
    :attr:`password`,
    :attr:`port`,
    :attr:`poll_interval`
    """

    def __init__(self, ui):
        """Instantiate this command with the given UI.

        Args:
          ui (UI): User interface instance.
        """
        super(RemoteCommand, self).__init__(ui)
        self.server = None
        """vCenter server or ESXi host to connect to."""
        self.username = None
        """Server login username."""
        self.password = None
        """Server login password."""
        self._port = 443
        self._poll_interval = TASK_POLL_INTERVAL

    @property
    def port(self):
        """HTTPS port of the server (default 443).

        Raises:
          InvalidInputError: if not a valid TCP port number.
        """
        return self._port

    @port.setter
    def port(self, value):
        self._port = validate_int(value, minimum=1, maximum=65535,
                                  label="port")

    @property
    def poll_interval(self):
        """Seconds to wait between task status checks.

        Raises:
          InvalidInputError: if negative or not a number.
        """
        return self._poll_interval

    @poll_interval.setter
    def poll_interval(self, value):
        self._poll_interval = non_negative_float(value, label="poll interval")

    def ready_to_run(self):
        """Check whether the module is ready to :meth:`run`.

        Returns:
          tuple: ``(True, ready_message)`` or ``(False, reason_why_not)``
        """
        if not self.server:
            return False, "SERVER is a mandatory argument!"
        return super(RemoteCommand, self).ready_to_run()

    def connect(self):
        """Get a connection to :attr:`server`, prompting for credentials.

        If no :attr:`username` was given, the current user's name is used;
        if no :attr:`password` was given, the user is prompted for one.

        Returns:
          SmarterConnection: Context manager yielding a service instance.
        """
        if self.username is None:
            self.username = getpass.getuser()
        if self.password is None:
            self.password = self.ui.get_password(self.username, self.server)
        return SmarterConnection(self.ui, self.server, self.username,
                                 self.password, self.port)

    def tracker(self):
        """Get a task tracker configured with :attr:`poll_interval`.

        Returns:
          TaskTracker: New tracker instance.
        """
        return TaskTracker(poll_interval=self.poll_interval)

    @staticmethod
    def connection_parser():
        """Create a parser holding the arguments shared by remote commands.

        Returns:
          argparse.ArgumentParser: Parser suitable for use as a ``parents``
          entry of a command's own subparser.
        """
        parser = argparse.ArgumentParser(add_help=False)
        group = parser.add_argument_group("connection options")
        group.add_argument('-u', '--username',
                           help="Server login username (default: current"
                           " user)")
        group.add_argument('-p', '--password',
                           help="Server login password (default: prompt for"
                           " it)")
        group.add_argument('--port', type=positive_int,
                           help="Server HTTPS port (default: 443)")
        group.add_argument('--poll-interval', type=non_negative_float,
                           help="Seconds between task status checks"
                           " (default: {0})".format(TASK_POLL_INTERVAL))
        parser.add_argument('SERVER',
                            help="vCenter server or ESXi host to connect to")
        return parser
