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
Package implementing EZT, the eager-zeroed thick disk provisioning tool.

Utility modules
---------------
.. autosummary::
  :toctree:

  EZT.data_validation
  EZT.utilities

Sub-packages
------------
.. autosummary::
  :toctree:

  EZT.commands
  EZT.ui
  EZT.vsphere

.. note::
  The hierarchy of permissible imports between sub-packages is as follows::

      EZT.ui
         |
         +---> EZT.commands
         |        |
         +--------+---> EZT.vsphere

  None of the other sub-packages may ``import EZT.ui``. If they need to
  interact with the user (for example, to report task progress), they
  accept a callback from the caller instead.
"""

import logging

# VerboseLogger adds a log level 'verbose' between 'info' and 'debug'.
# This lets us be a bit more fine-grained in our logging verbosity.
from verboselogs import VerboseLogger

logging.setLoggerClass(VerboseLogger)
logging.captureWarnings(True)

__version__ = "0.1.0"

__version_long__ = (
    """EZT (eager-zeroed thick disk provisioner), version """ + __version__ +
    """\nCopyright (C) 2026 the EZT project developers."""
)
