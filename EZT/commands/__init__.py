# October 2026
# Copyright (c) 2026 the EZT project developers.
# See the COPYRIGHT.txt file at the top-level directory of this distribution.
#
# This file is part of the EZT (Eager-Zeroed Thick disk) project.
# It is subject to the license terms in the LICENSE.txt file found in the
# top-level directory of this distribution. No part of EZT, including this
# file, may be copied, modified, propagated, or distributed except according
# to the terms contained in the LICENSE.txt file.

"""
Package describing the operations EZT can perform against a vSphere server.

API
---

.. autosummary::
  :nosignatures:

  Command
  RemoteCommand

Command modules
---------------

.. autosummary::
  :toctree:

  EZT.commands.add_disk
  EZT.commands.task_status
"""

from .command import command_classes, Command, RemoteCommand

# flake8: noqa: F401
from .add_disk import EZTAddDisk
from .task_status import EZTTaskStatus

__all__ = (
    'command_classes',
    'Command',
    'RemoteCommand',
)
