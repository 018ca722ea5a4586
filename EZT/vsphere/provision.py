#!/usr/bin/env python
#
# provision.py - Eager-zeroed thick disk provisioning workflow
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

"""Workflow for adding an eagerly scrubbed disk to a virtual machine.

The workflow runs in up to three stages:

1. ``controller`` - make sure the VM has a storage controller, creating one
   (and always waiting for it) if necessary.
2. ``disk`` - submit the disk creation request, then either wait for it or
   hand the running task back to the caller.
3. ``verify`` - after a synchronous success, find the new disk in the VM's
   refreshed device inventory.

Nothing is retried and nothing is locked: if another client changes the
same VM concurrently, the server's own validation is the only arbiter.

**Classes**

.. autosummary::
  :nosignatures:

  ProvisioningResult

**Functions**

.. autosummary::
  :nosignatures:

  create_eager_zero_disk
  resolve_or_create_controller
"""

import logging
from collections import namedtuple

from EZT.data_validation import (
    capacity_kb as validate_capacity_kb,
    canonicalize_controller_kind, canonicalize_disk_mode,
)
from .device_specs import (
    DEFAULT_DISK_MODE, build_controller_change, build_disk_change,
)
from .errors import ProvisioningFailedError
from .inventory import (
    controller_kind_of, find_disk, find_storage_controller,
    get_device_inventory, next_unit_number,
)
from .tasks import TaskTracker, task_id

logger = logging.getLogger(__name__)

ProvisioningResult = namedtuple('ProvisioningResult', ['disk', 'task'])
"""Outcome of :func:`create_eager_zero_disk`.

``disk`` is the verified ``vim.vm.device.VirtualDisk`` after a synchronous
run, or ``None`` after an asynchronous one. ``task`` is the disk creation
task in either case.
"""


def resolve_or_create_controller(vm, controller_kind=None, tracker=None,
                                 on_progress=None):
    """Get the VM's storage controller, creating one if it has none.

    If a controller already exists it is used as-is, even if it is not of
    the requested kind. Creation always blocks until the server finishes.

    Args:
      vm (vim.VirtualMachine): Virtual machine to inspect.
      controller_kind (str): Kind of controller to create, if needed.
      tracker (TaskTracker): Task tracker to use; a default one if unset.
      on_progress (callable): Progress callback for controller creation.
    Returns:
      vim.vm.device.VirtualSCSIController: Existing or newly added
      controller.
    Raises:
      ProvisioningFailedError: if controller creation fails, or if the
          new controller cannot be found afterward.
      RemoteUnavailableError: if the server cannot be reached.
    """
    if tracker is None:
        tracker = TaskTracker()
    requested_kind = canonicalize_controller_kind(controller_kind)

    controller = find_storage_controller(get_device_inventory(vm))
    if controller is not None:
        existing_kind = controller_kind_of(controller)
        if requested_kind and requested_kind != existing_kind:
            logger.notice("VM already has a %s storage controller; using it"
                          " instead of creating a %s controller",
                          existing_kind or "SCSI", requested_kind)
        else:
            logger.verbose("Using existing storage controller (key %s)",
                           controller.key)
        return controller

    logger.info("VM has no storage controller; creating one")
    change = build_controller_change(requested_kind)
    task = tracker.submit(vm, [change], stage='controller')
    tracker.await_completion(task, 'controller', on_progress=on_progress)

    controller = find_storage_controller(get_device_inventory(vm))
    if controller is None:
        raise ProvisioningFailedError(
            'controller',
            "task {0} succeeded but the VM still has no storage controller"
            .format(task_id(task)))
    logger.info("Created storage controller (key %s)", controller.key)
    return controller


def create_eager_zero_disk(vm, datastore, capacity_kb, controller_kind=None,
                           persistence=DEFAULT_DISK_MODE, split=False,
                           run_async=False, tracker=None, on_progress=None):
    """Add a new eager-zeroed thick disk to the given virtual machine.

    All arguments are validated before anything is sent to the server.

    Args:
      vm (vim.VirtualMachine): Virtual machine to add the disk to.
      datastore (DatastoreRef): Datastore to place the disk on.
      capacity_kb (int): Disk size in KiB.
      controller_kind (str): Kind of controller to create if the VM has
          none. Ignored if a controller already exists.
      persistence (str): Disk mode.
      split (bool): Split the backing file into 2 GB extents.
      run_async (bool): If True, return as soon as the disk task is
          submitted instead of waiting for it. Controller creation, if
          needed, is still waited for.
      tracker (TaskTracker): Task tracker to use; a default one if unset.
      on_progress (callable): Callback taking an int percentage, invoked
          while waiting on any task.
    Returns:
      ProvisioningResult: The new disk (sync only) and the disk task.
    Raises:
      InvalidInputError: if any argument is invalid.
      ProvisioningFailedError: if any stage fails.
      RemoteUnavailableError: if the server cannot be reached.
    """
    capacity_kb = validate_capacity_kb(capacity_kb)
    persistence = canonicalize_disk_mode(persistence) or DEFAULT_DISK_MODE
    canonicalize_controller_kind(controller_kind)
    if tracker is None:
        tracker = TaskTracker()

    controller = resolve_or_create_controller(vm, controller_kind,
                                              tracker=tracker,
                                              on_progress=on_progress)
    unit_number = next_unit_number(controller, get_device_inventory(vm))
    change = build_disk_change(capacity_kb, persistence, split, datastore,
                               controller, unit_number)

    if run_async:
        task = tracker.submit_and_forget(vm, [change], stage='disk')
        return ProvisioningResult(None, task)

    task = tracker.submit(vm, [change], stage='disk')
    tracker.await_completion(task, 'disk', on_progress=on_progress)

    disk = find_disk(get_device_inventory(vm), controller.key, unit_number)
    if disk is None:
        raise ProvisioningFailedError(
            'verify',
            "no disk found at unit {0} of controller {1} after task {2}"
            .format(unit_number, controller.key, task_id(task)))
    logger.info("Created disk %s", disk.backing.fileName)
    return ProvisioningResult(disk, task)
