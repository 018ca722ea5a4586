#!/usr/bin/env python
#
# device_specs.py - Builders for VM device change requests
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

"""Builders for the device change requests submitted to the server.

**Functions**

.. autosummary::
  :nosignatures:

  build_controller_change
  build_disk_change
  placeholder_key

**Constants**

.. autosummary::
  DEFAULT_CONTROLLER_KIND
  DEFAULT_DISK_MODE
"""

import logging

from pyVmomi import vim

from EZT.data_validation import (
    capacity_kb as validate_capacity_kb,
    canonicalize_controller_kind, canonicalize_disk_mode,
)
from EZT.utilities import datastore_path, pretty_bytes
from .inventory import CONTROLLER_CLASSES

logger = logging.getLogger(__name__)

DEFAULT_CONTROLLER_KIND = 'lsilogic'
"""Controller kind created when the caller does not request one."""

DEFAULT_DISK_MODE = 'persistent'
"""Disk persistence mode used when the caller does not request one."""


def placeholder_key(device_changes=None):
    """Get a negative device key not yet used in the given change list.

    The server replaces placeholder keys with real ones when it applies
    the change.

    Args:
      device_changes (list): ``VirtualDeviceSpec`` objects already queued.
    Returns:
      int: Negative key.
    """
    key = -1
    for spec in device_changes or []:
        device_key = getattr(spec.device, 'key', None)
        if device_key is not None and device_key <= key:
            key = device_key - 1
    return key


def build_controller_change(controller_kind=None, device_changes=None):
    """Build a request to add a new SCSI controller on bus 0.

    Args:
      controller_kind (str): Kind of controller (see
          :func:`~EZT.data_validation.canonicalize_controller_kind`).
          Defaults to :data:`DEFAULT_CONTROLLER_KIND`.
      device_changes (list): Other specs in the same change, if any,
          so that a unique placeholder key can be chosen.
    Returns:
      vim.vm.device.VirtualDeviceSpec: Device change request.
    Raises:
      ValueUnsupportedError: if the controller kind is not recognized.
    """
    kind = (canonicalize_controller_kind(controller_kind) or
            DEFAULT_CONTROLLER_KIND)
    controller = CONTROLLER_CLASSES[kind]()
    controller.key = placeholder_key(device_changes)
    controller.busNumber = 0
    controller.sharedBus = (
        vim.vm.device.VirtualSCSIController.Sharing.noSharing)

    spec = vim.vm.device.VirtualDeviceSpec()
    spec.operation = vim.vm.device.VirtualDeviceSpec.Operation.add
    spec.device = controller
    logger.verbose("Built request to add %s controller (key %d)",
                   kind, controller.key)
    return spec


def build_disk_change(capacity_kb, persistence, split, datastore,
                      controller, unit_number, device_changes=None):
    """Build a request to create and attach an eagerly scrubbed disk.

    The backing is always thick-provisioned and eagerly scrubbed, so the
    whole disk is zeroed when it is created rather than on first write.
    The backing file name is only the bracketed datastore name; the server
    picks the concrete path.

    Args:
      capacity_kb (int): Disk size in KiB, at least
          :data:`~EZT.data_validation.MIN_CAPACITY_KB`.
      persistence (str): Disk mode, one of
          :data:`~EZT.data_validation.DISK_MODES`. ``None`` selects
          :data:`DEFAULT_DISK_MODE`.
      split (bool): Split the backing into 2 GB extents instead of one
          monolithic file.
      datastore (DatastoreRef): Datastore to hold the new disk.
      controller (vim.vm.device.VirtualSCSIController): Owning controller.
      unit_number (int): Address of the disk on the controller.
      device_changes (list): Other specs in the same change, if any.
    Returns:
      vim.vm.device.VirtualDeviceSpec: Device change request.
    Raises:
      ValueTooLowError: if ``capacity_kb`` is below the minimum.
      ValueUnsupportedError: if ``persistence`` is not a known disk mode.
    """
    capacity_kb = validate_capacity_kb(capacity_kb)
    disk_mode = canonicalize_disk_mode(persistence) or DEFAULT_DISK_MODE

    backing = vim.vm.device.VirtualDisk.FlatVer2BackingInfo()
    backing.diskMode = disk_mode
    backing.split = bool(split)
    backing.eagerlyScrub = True
    backing.thinProvisioned = False
    backing.writeThrough = False
    backing.fileName = datastore_path(datastore.name)
    backing.datastore = datastore.ref

    disk = vim.vm.device.VirtualDisk()
    disk.key = placeholder_key(device_changes)
    disk.controllerKey = controller.key
    disk.unitNumber = unit_number
    disk.capacityInKB = capacity_kb
    disk.backing = backing

    spec = vim.vm.device.VirtualDeviceSpec()
    spec.operation = vim.vm.device.VirtualDeviceSpec.Operation.add
    spec.fileOperation = vim.vm.device.VirtualDeviceSpec.FileOperation.create
    spec.device = disk
    logger.verbose("Built request to create %s %s disk on %s at %s:%d",
                   pretty_bytes(capacity_kb, 1), disk_mode,
                   backing.fileName, controller.key, unit_number)
    return spec
