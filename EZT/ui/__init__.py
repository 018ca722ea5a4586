# October 2026
# Copyright (c) 2026 the EZT project developers.
# See the COPYRIGHT.txt file at the top-level directory of this distribution.
#
# This file is part of the EZT (Eager-Zeroed Thick disk) project.
# It is subject to the license terms in the LICENSE.txt file found in the
# top-level directory of this distribution. No part of EZT, including this
# file, may be copied, modified, propagated, or distributed except according
# to the terms contained in the LICENSE.txt file.

"""User interface classes for EZT.

.. autosummary::
  :nosignatures:

  UI
  CLI

.. autosummary::
  :toctree:

  EZT.ui.ui
  EZT.ui.cli
"""

from .ui import UI
from .cli import CLI

__all__ = ('UI', 'CLI')
