#!/usr/bin/env python
#
# errors.py - Exceptions raised while talking to the vSphere server
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

"""Exceptions raised by the provisioning workflow.

**Exceptions**

.. autosummary::
  :nosignatures:

  ProvisioningFailedError
  RemoteUnavailableError

**Constants**

.. autosummary::
  TRANSPORT_ERRORS
"""

import errno
import http.client

import requests
from pyVmomi import vmodl


class ProvisioningFailedError(EnvironmentError):
    """A submitted task failed, or its result could not be found afterward.

    Args:
      stage (str): Workflow stage that failed, one of :data:`STAGES`.
      message (str): Server-provided (or locally generated) explanation.
    """

    STAGES = ('controller', 'disk', 'verify')
    """Workflow stages that may fail."""

    def __init__(self, stage, message):
        """Create an instance of this class."""
        if stage not in self.STAGES:
            raise ValueError("Unknown provisioning stage '{0}'".format(stage))
        self.stage = stage
        self.message = message
        super(ProvisioningFailedError, self).__init__(
            errno.EIO, "{0} stage failed: {1}".format(stage, message))

    def __str__(self):
        """Human-readable string representation."""
        return self.strerror


class RemoteUnavailableError(EnvironmentError):
    """Transport-level failure talking to the vSphere server.

    Args:
      operation (str): What we were trying to do at the time.
      cause (Exception): The underlying transport error.
    """

    def __init__(self, operation, cause):
        """Create an instance of this class."""
        self.operation = operation
        self.cause = cause
        super(RemoteUnavailableError, self).__init__(
            getattr(cause, 'errno', None) or errno.EHOSTUNREACH,
            "Unable to {0}: {1}".format(operation, cause))

    def __str__(self):
        """Human-readable string representation."""
        return self.strerror


TRANSPORT_ERRORS = (
    IOError,
    http.client.HTTPException,
    requests.exceptions.ConnectionError,
    vmodl.fault.HostCommunication,
)
"""Exception types treated as the server being unreachable."""
