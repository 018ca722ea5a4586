# October 2026
# Copyright (c) 2026 the EZT project developers.
# See the COPYRIGHT.txt file at the top-level directory of this distribution.
#
# This file is part of the EZT (Eager-Zeroed Thick disk) project.
# It is subject to the license terms in the LICENSE.txt file found in the
# top-level directory of this distribution. No part of EZT, including this
# file, may be copied, modified, propagated, or distributed except according
# to the terms contained in the LICENSE.txt file.

"""Package for provisioning disks on vSphere through pyVmomi.

The modules in this package know nothing about the CLI; they can be driven
directly from any code that holds a connected ``vim.ServiceInstance``.

.. autosummary::
  :toctree:

  EZT.vsphere.connection
  EZT.vsphere.device_specs
  EZT.vsphere.errors
  EZT.vsphere.inventory
  EZT.vsphere.provision
  EZT.vsphere.tasks
"""

from .connection import (
    DatastoreRef, SmarterConnection, find_datastore, find_object, find_vm,
)
from .errors import ProvisioningFailedError, RemoteUnavailableError
from .provision import (
    ProvisioningResult, create_eager_zero_disk, resolve_or_create_controller,
)
from .tasks import ProgressReporter, TaskStatus, TaskTracker

__all__ = (
    'DatastoreRef',
    'ProgressReporter',
    'ProvisioningFailedError',
    'ProvisioningResult',
    'RemoteUnavailableError',
    'SmarterConnection',
    'TaskStatus',
    'TaskTracker',
    'create_eager_zero_disk',
    'find_datastore',
    'find_object',
    'find_vm',
    'resolve_or_create_controller',
)
