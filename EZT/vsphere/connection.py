#!/usr/bin/env python
#
# connection.py - Sessions with a vCenter or ESXi server
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

"""Connecting to a vSphere server and looking up inventory objects.

**Classes**

.. autosummary::
  :nosignatures:

  DatastoreRef
  SmarterConnection

**Functions**

.. autosummary::
  :nosignatures:

  find_datastore
  find_object
  find_vm
"""

import logging
import re
import ssl
from collections import namedtuple

import requests
from pyVmomi import vim
from pyVim.connect import SmartConnection

from EZT.data_validation import InvalidInputError

logger = logging.getLogger(__name__)

DatastoreRef = namedtuple('DatastoreRef', ['name', 'ref'])
"""A datastore's display name plus its managed object reference."""


class SmarterConnection(SmartConnection):
    """A smarter version of pyVmomi's SmartConnection context manager.

    Args:
      ui (EZT.ui.UI): User interface, used to confirm acceptance of an
          unrecognized server certificate.
      server (str): Server hostname or IP address.
      username (str): Login user name.
      password (str): Login password.
      port (int): HTTPS port of the server.
    """

    def __init__(self, ui, server, username, password, port=443):
        """Create a connection to the given server."""
        self.ui = ui
        self.server = server
        self.username = username
        self.password = password
        self.port = port
        super(SmarterConnection, self).__init__(host=server, user=username,
                                                pwd=password, port=port)

    def __enter__(self):
        """Establish a connection and use it as the context manager object.

        Unlike SmartConnection, this lets the user override SSL certificate
        validation failures and connect anyway. It also produces slightly
        more meaningful error messages on failure.

        Returns:
          vim.ServiceInstance: Root object of the server's API.
        """
        logger.verbose("Establishing connection to %s:%s...",
                       self.server, self.port)
        try:
            return super(SmarterConnection, self).__enter__()
        except vim.fault.HostConnectFault as exc:
            if not re.search("certificate verify failed", exc.msg):
                raise
            self._accept_unverified_certificate(exc.msg)
            return super(SmarterConnection, self).__enter__()
        except ssl.SSLError as exc:
            if not re.search("certificate verify failed", str(exc)):
                raise
            self._accept_unverified_certificate(str(exc))
            return super(SmarterConnection, self).__enter__()
        except requests.exceptions.ConnectionError as exc:
            errnum, inner_message = self.unwrap_connection_error(exc)
            if exc.errno is None:
                exc.errno = errnum
            if exc.strerror is None:
                exc.strerror = ("Error connecting to {0}:{1}: {2}"
                                .format(self.server, self.port,
                                        inner_message))
            raise

    def __exit__(self, exc_type, exc_value, trace):
        """Disconnect from the server.

        Input errors are the caller's to report, so only other failures
        are logged here.
        """
        super(SmarterConnection, self).__exit__(exc_type, exc_value, trace)
        if exc_type is not None and not issubclass(exc_type,
                                                   InvalidInputError):
            logger.error("Session failed - %s", exc_value)

    def _accept_unverified_certificate(self, message):
        """Ask the user whether to trust the server's certificate anyway.

        Args:
          message (str): Certificate error reported by the SSL layer.
        Raises:
          SystemExit: if the user declines.
        """
        # Self-signed certificates are pretty common for ESXi servers
        logger.warning(message)
        self.ui.confirm_or_die("SSL certificate for {0} is self-signed or "
                               "otherwise not recognized as valid. "
                               "Accept certificate anyway?"
                               .format(self.server))
        _create_unverified_context = ssl._create_unverified_context
        ssl._create_default_https_context = _create_unverified_context

    @staticmethod
    def unwrap_connection_error(outer_e):
        """Extract the innermost errno and message from a ConnectionError.

        The ``requests`` library wraps socket errors in one or more layers
        of its own exceptions, which hides the useful part from the user.

        Args:
          outer_e (Exception): Error raised by the connection attempt.
        Returns:
          tuple: ``(errnum, inner_message)``, either of which may be None.
        """
        errnum = None
        inner_message = None
        while errnum is None:
            inner_e = None
            if hasattr(outer_e, 'reason'):
                inner_e = outer_e.reason
            else:
                for arg in outer_e.args:
                    if isinstance(arg, Exception):
                        inner_e = arg
                        break
            if inner_e is None:
                break
            if getattr(inner_e, 'strerror', None):
                inner_message = inner_e.strerror
            elif hasattr(inner_e, 'message'):
                inner_message = inner_e.message
            elif inner_e.args:
                inner_message = inner_e.args[0]
            logger.debug("Inner exception: %s", inner_e)
            errnum = getattr(inner_e, 'errno', None)
            outer_e = inner_e
        return errnum, inner_message


def find_object(si, vimtype, name):
    """Look up an inventory object by type and name.

    Args:
      si (vim.ServiceInstance): Connected service instance.
      vimtype (type): Managed object class, such as ``vim.VirtualMachine``.
      name (str): Display name to match exactly.
    Returns:
      vim.ManagedEntity: Matching object, or ``None`` if not found.
    """
    content = si.RetrieveContent()
    container = content.viewManager.CreateContainerView(
        content.rootFolder, [vimtype], True)
    try:
        for candidate in container.view:
            if candidate.name == name:
                return candidate
    finally:
        container.Destroy()
    return None


def find_vm(si, vm_name):
    """Look up a virtual machine by name.

    Args:
      si (vim.ServiceInstance): Connected service instance.
      vm_name (str): Name of the VM.
    Returns:
      vim.VirtualMachine: The VM.
    Raises:
      InvalidInputError: if no such VM exists.
    """
    vm = find_object(si, vim.VirtualMachine, vm_name)
    if vm is None:
        raise InvalidInputError("No VM named '{0}' was found on the server"
                                .format(vm_name))
    logger.verbose("Found VM '%s'", vm_name)
    return vm


def find_datastore(si, datastore_name):
    """Look up a datastore by name.

    Args:
      si (vim.ServiceInstance): Connected service instance.
      datastore_name (str): Name of the datastore.
    Returns:
      DatastoreRef: Name and reference of the datastore.
    Raises:
      InvalidInputError: if no such datastore exists.
    """
    datastore = find_object(si, vim.Datastore, datastore_name)
    if datastore is None:
        raise InvalidInputError("No datastore named '{0}' was found on the"
                                " server".format(datastore_name))
    logger.verbose("Found datastore '%s'", datastore_name)
    return DatastoreRef(datastore_name, datastore)
