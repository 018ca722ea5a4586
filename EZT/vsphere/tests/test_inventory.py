#!/usr/bin/env python
#
# test_inventory.py - Unit test cases for device inventory helpers
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

"""Unit test cases for EZT.vsphere.inventory module."""

import socket

import mock
from pyVmomi import vim

from EZT.vsphere.errors import RemoteUnavailableError
from EZT.vsphere.inventory import (
    DeviceKind, classify_device, controller_kind_of, find_disk,
    find_storage_controller, get_device_inventory, next_unit_number,
)
from EZT.vsphere.tests.vsphere_testcase import VSphereTestCase


class TestClassifyDevice(VSphereTestCase):
    """Test cases for classifying devices by capability."""

    def test_classify_device(self):
        """Controllers, disks and everything else are told apart."""
        for klass in (vim.vm.device.VirtualLsiLogicController,
                      vim.vm.device.VirtualLsiLogicSASController,
                      vim.vm.device.VirtualBusLogicController,
                      vim.vm.device.ParaVirtualSCSIController):
            self.assertEqual(classify_device(klass()), DeviceKind.CONTROLLER)
        self.assertEqual(classify_device(vim.vm.device.VirtualDisk()),
                         DeviceKind.DISK)
        self.assertEqual(classify_device(self.nic()), DeviceKind.OTHER)
        self.assertEqual(classify_device(vim.vm.device.VirtualIDEController()),
                         DeviceKind.OTHER)
        self.assertEqual(classify_device(vim.vm.device.VirtualCdrom()),
                         DeviceKind.OTHER)

    def test_controller_kind_of(self):
        """Map controller devices back to their kind strings."""
        self.assertEqual(controller_kind_of(
            vim.vm.device.VirtualLsiLogicController()), 'lsilogic')
        self.assertEqual(controller_kind_of(
            vim.vm.device.VirtualLsiLogicSASController()), 'lsilogicsas')
        self.assertEqual(controller_kind_of(
            vim.vm.device.ParaVirtualSCSIController()), 'pvscsi')
        self.assertEqual(controller_kind_of(
            vim.vm.device.VirtualBusLogicController()), 'buslogic')
        self.assertEqual(controller_kind_of(
            vim.vm.device.VirtualIDEController()), None)


class TestGetDeviceInventory(VSphereTestCase):
    """Test cases for get_device_inventory()."""

    def test_inventory(self):
        """The device list is read fresh on each call."""
        nic = self.nic()
        controller = self.controller()
        vm = self.mock_vm([nic, controller])
        self.assertEqual(get_device_inventory(vm), [nic, controller])
        vm.config.hardware.device.append(self.disk(controller, 0))
        self.assertEqual(len(get_device_inventory(vm)), 3)

    def test_no_config(self):
        """A VM without a configuration has no devices."""
        vm = self.mock_vm()
        vm.config = None
        self.assertEqual(get_device_inventory(vm), [])
        self.assertLogged(**self.NO_VM_CONFIG)

    def test_unreachable(self):
        """Transport errors are reported as RemoteUnavailableError."""
        vm = mock.Mock()
        type(vm).config = mock.PropertyMock(
            side_effect=socket.error(61, "Connection refused"))
        with self.assertRaises(RemoteUnavailableError) as catcher:
            get_device_inventory(vm)
        self.assertEqual(catcher.exception.errno, 61)
        self.assertRegex(str(catcher.exception),
                         "Unable to read device inventory:.*refused")


class TestFindStorageController(VSphereTestCase):
    """Test cases for find_storage_controller()."""

    def test_none(self):
        """No controller among the devices."""
        self.assertEqual(find_storage_controller([]), None)
        self.assertEqual(find_storage_controller(
            [self.nic(), vim.vm.device.VirtualIDEController(key=200)]), None)

    def test_first_wins(self):
        """The first controller in the inventory is the one used."""
        first = self.controller(key=1000)
        second = self.controller(
            key=1001, kind=vim.vm.device.ParaVirtualSCSIController)
        self.assertIs(find_storage_controller(
            [self.nic(), first, second]), first)
        self.assertIs(find_storage_controller(
            [self.nic(), second, first]), second)


class TestNextUnitNumber(VSphereTestCase):
    """Test cases for next_unit_number()."""

    def test_empty_controller(self):
        """A controller with nothing attached starts at unit 0."""
        controller = self.controller()
        self.assertEqual(next_unit_number(controller, [controller]), 0)

    def test_sequential(self):
        """Units 0 and 1 in use, so 2 is next."""
        controller = self.controller()
        devices = [controller,
                   self.disk(controller, 0),
                   self.disk(controller, 1)]
        self.assertEqual(next_unit_number(controller, devices), 2)

    def test_gap_filled(self):
        """Units 1 and 2 in use, so the gap at 0 is filled first."""
        controller = self.controller()
        devices = [controller,
                   self.disk(controller, 1),
                   self.disk(controller, 2)]
        self.assertEqual(next_unit_number(controller, devices), 0)

    def test_controller_unit_reserved(self):
        """The controller's own SCSI unit number is never handed out."""
        controller = self.controller(scsi_unit=7)
        devices = [controller] + [self.disk(controller, unit)
                                  for unit in range(7)]
        self.assertEqual(next_unit_number(controller, devices), 8)

    def test_controller_unit_unreported(self):
        """Without a reported SCSI unit, only disks are counted."""
        controller = self.controller(scsi_unit=None)
        devices = [controller] + [self.disk(controller, unit)
                                  for unit in range(7)]
        self.assertEqual(next_unit_number(controller, devices), 7)

    def test_other_controller_ignored(self):
        """Disks on a different controller do not count."""
        controller = self.controller(key=1000)
        other = self.controller(key=1001)
        devices = [controller, other,
                   self.disk(controller, 0),
                   self.disk(other, 1),
                   self.disk(other, 2)]
        self.assertEqual(next_unit_number(controller, devices), 1)


class TestFindDisk(VSphereTestCase):
    """Test cases for find_disk()."""

    def test_find_disk(self):
        """Disks are found only at their exact address."""
        controller = self.controller()
        disk0 = self.disk(controller, 0)
        disk1 = self.disk(controller, 1)
        devices = [self.nic(), controller, disk0, disk1]
        self.assertIs(find_disk(devices, controller.key, 0), disk0)
        self.assertIs(find_disk(devices, controller.key, 1), disk1)
        self.assertEqual(find_disk(devices, controller.key, 2), None)
        self.assertEqual(find_disk(devices, 1001, 0), None)
