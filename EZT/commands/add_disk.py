#!/usr/bin/env python
#
# add_disk.py - Implements "ezt add-disk" command
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

"""Module for adding eager-zeroed thick disks to VMs.

**Classes**

.. autosummary::
  :nosignatures:

  EZTAddDisk
"""

import argparse
import logging

from EZT.data_validation import (
    capacity_kb as validate_capacity_kb,
    canonicalize_controller_kind, canonicalize_disk_mode,
    CONTROLLER_KINDS, DISK_MODES,
)
from EZT.utilities import pretty_bytes
from EZT.vsphere.connection import find_datastore, find_vm
from EZT.vsphere.device_specs import DEFAULT_CONTROLLER_KIND
from EZT.vsphere.provision import create_eager_zero_disk
from EZT.vsphere.tasks import ProgressReporter, task_id
from .command import command_classes, RemoteCommand

logger = logging.getLogger(__name__)


class EZTAddDisk(RemoteCommand):
    """Add a new eagerly scrubbed thick disk to an existing VM.

    Inherited attributes:
    :attr:`~Command.ui`,
    :attr:`~RemoteCommand.server`,
    :attr:`~RemoteCommand.username`,
    :attr:`~RemoteCommand.password`,
    :attr:`~RemoteCommand.port`,
    :attr:`~RemoteCommand.poll_interval`

    Attributes:
    :attr:`vm_name`,
    :attr:`datastore`,
    :attr:`capacity_kb`,
    :attr:`controller`,
    :attr:`persistence`,
    :attr:`split`,
    :attr:`run_async`
    """

    def __init__(self, ui):
        """Instantiate this command with the given UI.

        Args:
          ui (UI): User interface instance.
        """
        super(EZTAddDisk, self).__init__(ui)
        self.vm_name = None
        """Name of the VM to add a disk to."""
        self.datastore = None
        """Name of the datastore to hold the new disk."""
        self._capacity_kb = None
        self._controller = None
        self._persistence = None
        self.split = False
        """Whether to split the backing into 2 GB extents."""
        self.run_async = False
        """Whether to return without waiting for the disk to be created."""
        self.result = None
        """:class:`~EZT.vsphere.provision.ProvisioningResult` after
        :meth:`run`."""

    @property
    def capacity_kb(self):
        """Capacity of the new disk in KiB.

        Raises:
          InvalidInputError: if not an integer of at least 1024.
        """
        return self._capacity_kb

    @capacity_kb.setter
    def capacity_kb(self, value):
        self._capacity_kb = validate_capacity_kb(value)

    @property
    def controller(self):
        """Kind of SCSI controller to create if the VM has none.

        Raises:
          ValueUnsupportedError: if not a recognized controller kind.
        """
        return self._controller

    @controller.setter
    def controller(self, value):
        self._controller = canonicalize_controller_kind(value)

    @property
    def persistence(self):
        """Disk persistence mode, such as ``persistent``.

        Raises:
          ValueUnsupportedError: if not a recognized disk mode.
        """
        return self._persistence

    @persistence.setter
    def persistence(self, value):
        self._persistence = canonicalize_disk_mode(value)

    def ready_to_run(self):
        """Check whether the module is ready to :meth:`run`.

        Returns:
          tuple: ``(True, ready_message)`` or ``(False, reason_why_not)``
        """
        if not self.vm_name:
            return False, "VM_NAME is a mandatory argument!"
        if not self.datastore:
            return False, "DATASTORE is a mandatory argument!"
        if self.capacity_kb is None:
            return False, "CAPACITY_KB is a mandatory argument!"
        return super(EZTAddDisk, self).ready_to_run()

    def run(self):
        """Do the actual work of this command.

        Raises:
          InvalidInputError: if :meth:`ready_to_run` reports ``False``
          ProvisioningFailedError: if the server fails to create the disk.
          RemoteUnavailableError: if the server cannot be reached.
        """
        super(EZTAddDisk, self).run()

        with self.connect() as si:
            vm = find_vm(si, self.vm_name)
            datastore = find_datastore(si, self.datastore)
            logger.notice("Adding %s disk to VM '%s' on datastore '%s'",
                          pretty_bytes(self.capacity_kb, 1),
                          self.vm_name, self.datastore)
            self.result = create_eager_zero_disk(
                vm, datastore, self.capacity_kb,
                controller_kind=self.controller,
                persistence=self.persistence,
                split=self.split,
                run_async=self.run_async,
                tracker=self.tracker(),
                on_progress=ProgressReporter(
                    "Adding disk to '{0}'".format(self.vm_name)))

    def finished(self):
        """Report the new disk, or the pending task, to the user."""
        if self.result is not None:
            if self.result.disk is None:
                print("Disk creation submitted as task {0}"
                      .format(task_id(self.result.task)))
                print("Check on it with 'ezt task-status {0} {1}'"
                      .format(self.server, task_id(self.result.task)))
            else:
                disk = self.result.disk
                print("Capacity:          {0}".format(
                    pretty_bytes(disk.capacityInKB, 1)))
                print("Persistence mode:  {0}".format(disk.backing.diskMode))
                print("Eagerly scrubbed:  {0}".format(
                    disk.backing.eagerlyScrub))
                print("File name:         {0}".format(disk.backing.fileName))
        super(EZTAddDisk, self).finished()

    def create_subparser(self):
        """Create 'add-disk' CLI subparser."""
        parser = self.ui.add_subparser(
            'add-disk',
            add_help=False,
            parents=[self.connection_parser()],
            usage=self.ui.fill_usage("add-disk", [
                "SERVER VM_NAME DATASTORE CAPACITY_KB [-u USERNAME] \
[-p PASSWORD] [--port PORT] [-c CONTROLLER] [-m MODE] [--split] [--async] \
[--poll-interval SECONDS]",
            ]),
            help="""Add an eager-zeroed thick disk to a VM on a vSphere
server""",
            description="""
Create a new virtual disk, fully zeroed at creation time, and attach it to
an existing VM. If the VM has no SCSI controller, one is created first.
The disk is placed at the lowest free unit number on the controller.""",
            epilog=self.ui.fill_examples([
                ("Add a 20 GiB disk to VM 'myvm' on datastore 'ds0' of"
                 " vCenter server 192.0.2.100, as user 'admin'.",
                 'ezt add-disk 192.0.2.100 myvm ds0 20971520 -u admin'),
                ("Add a 1 GiB independent disk using a paravirtual"
                 " controller, without waiting for the disk to be zeroed.",
                 'ezt add-disk 192.0.2.100 myvm ds0 1048576'
                 ' -c pvscsi -m independent_persistent --async'),
            ]),
            formatter_class=argparse.RawDescriptionHelpFormatter)

        group = parser.add_argument_group("general options")

        group.add_argument('-h', '--help', action='help',
                           help="""Show this help message and exit""")
        group.add_argument('--async', dest='run_async', action='store_true',
                           help="""Return as soon as the disk creation task
                           is submitted instead of waiting for it to
                           complete""")

        group = parser.add_argument_group("disk-related options")

        group.add_argument('-c', '--controller',
                           help="""Kind of SCSI controller to create if the
                           VM has none (default: {0}; choices: {1})"""
                           .format(DEFAULT_CONTROLLER_KIND,
                                   ", ".join(CONTROLLER_KINDS + ['scsi'])))
        group.add_argument('-m', '--mode', dest='persistence',
                           help="""Disk persistence mode (default:
                           persistent; choices: {0})"""
                           .format(", ".join(DISK_MODES)))
        group.add_argument('--split', action='store_true',
                           help="""Split the disk backing into 2 GB
                           extents""")

        parser.add_argument('VM_NAME',
                            help="""Name of the VM to add the disk to""")
        parser.add_argument('DATASTORE',
                            help="""Datastore to create the disk on""")
        parser.add_argument('CAPACITY_KB',
                            help="""Size of the new disk in KiB (at least
                            1024)""")
        parser.set_defaults(instance=self)


command_classes.append(EZTAddDisk)
