#!/usr/bin/env python
#
# inventory.py - Reading and classifying a VM's virtual hardware
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

"""Read-only helpers for inspecting a virtual machine's device inventory.

The server hands back a flat list of mixed device types. Everything outside
this module works with the :class:`DeviceKind` tag that
:func:`classify_device` assigns, rather than with pyVmomi classes.

**Classes**

.. autosummary::
  :nosignatures:

  DeviceKind

**Functions**

.. autosummary::
  :nosignatures:

  classify_device
  controller_kind_of
  find_disk
  find_storage_controller
  get_device_inventory
  next_unit_number

**Constants**

.. autosummary::
  CONTROLLER_CLASSES
"""

import logging
from enum import Enum

from pyVmomi import vim

from .errors import RemoteUnavailableError, TRANSPORT_ERRORS

logger = logging.getLogger(__name__)

CONTROLLER_CLASSES = {
    'buslogic': vim.vm.device.VirtualBusLogicController,
    'lsilogic': vim.vm.device.VirtualLsiLogicController,
    'lsilogicsas': vim.vm.device.VirtualLsiLogicSASController,
    'pvscsi': vim.vm.device.ParaVirtualSCSIController,
}
"""Mapping of canonical controller kind to pyVmomi device class."""


class DeviceKind(Enum):
    """Capability-based tag for an entry in the device inventory."""

    CONTROLLER = 'controller'
    """Storage controller that disks can be attached to."""
    DISK = 'disk'
    """Virtual disk attached to some controller."""
    OTHER = 'other'
    """Anything this workflow does not care about (NICs, CD-ROMs, etc.)."""


def classify_device(device):
    """Tag the given device with its :class:`DeviceKind`.

    Args:
      device (vim.vm.device.VirtualDevice): Device from the inventory.
    Returns:
      DeviceKind: Capability of this device.
    """
    if isinstance(device, vim.vm.device.VirtualSCSIController):
        return DeviceKind.CONTROLLER
    if isinstance(device, vim.vm.device.VirtualDisk):
        return DeviceKind.DISK
    return DeviceKind.OTHER


def controller_kind_of(controller):
    """Get the canonical kind string for an existing controller device.

    Args:
      controller (vim.vm.device.VirtualSCSIController): Controller device.
    Returns:
      str: Key of :data:`CONTROLLER_CLASSES`, or ``None`` if unrecognized.
    """
    for (kind, klass) in CONTROLLER_CLASSES.items():
        if isinstance(controller, klass):
            return kind
    return None


def get_device_inventory(vm):
    """Fetch the current device list of the given virtual machine.

    Each call re-reads the VM's configuration from the server.

    Args:
      vm (vim.VirtualMachine): Virtual machine to inspect.
    Returns:
      list: Devices, in the order reported by the server.
    Raises:
      RemoteUnavailableError: if the server cannot be reached.
    """
    try:
        config = vm.config
    except TRANSPORT_ERRORS as exc:
        raise RemoteUnavailableError("read device inventory", exc)
    if config is None:
        logger.warning("No configuration is available for VM %s;"
                       " treating its device inventory as empty", vm)
        return []
    devices = list(config.hardware.device)
    logger.debug("VM %s reports %d device(s)", vm, len(devices))
    return devices


def find_storage_controller(devices):
    """Find the storage controller, if any, among the given devices.

    Only one storage controller per VM is supported, so the first match wins.

    Args:
      devices (list): Device inventory.
    Returns:
      vim.vm.device.VirtualSCSIController: Controller, or ``None``.
    """
    for device in devices:
        if classify_device(device) == DeviceKind.CONTROLLER:
            logger.debug("Found storage controller with key %s", device.key)
            return device
    return None


def next_unit_number(controller, devices):
    """Get the lowest unit number not used by a disk on this controller.

    Gaps left by removed disks are filled before new numbers are used.
    The SCSI controller's own unit number, when reported, is never
    handed out. This deliberately departs from looking at disks alone:
    with units 0 through 6 taken on a controller at unit 7, the result
    is 8, not 7. No upper bound is enforced here; the server rejects
    addresses beyond the controller's slot limit.

    Args:
      controller (vim.vm.device.VirtualSCSIController): Controller device.
      devices (list): Full device inventory of the VM.
    Returns:
      int: Unit number, 0 or greater.
    """
    if not controller.device:
        logger.debug("Controller %s has no attached devices", controller.key)
        return 0
    used = set()
    for device in devices:
        if (classify_device(device) == DeviceKind.DISK and
                device.controllerKey == controller.key):
            used.add(device.unitNumber)
    if controller.scsiCtlrUnitNumber is not None:
        used.add(controller.scsiCtlrUnitNumber)
    unit_number = 0
    while unit_number in used:
        unit_number += 1
    logger.debug("Unit numbers in use on controller %s: %s; next free is %d",
                 controller.key, sorted(used), unit_number)
    return unit_number


def find_disk(devices, controller_key, unit_number):
    """Find the disk at the given address.

    Args:
      devices (list): Device inventory.
      controller_key (int): Key of the disk's controller.
      unit_number (int): Unit number of the disk on its controller.
    Returns:
      vim.vm.device.VirtualDisk: Disk, or ``None`` if no disk is there.
    """
    for device in devices:
        if (classify_device(device) == DeviceKind.DISK and
                device.controllerKey == controller_key and
                device.unitNumber == unit_number):
            return device
    return None
