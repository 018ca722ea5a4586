#!/usr/bin/env python
#
# ui.py - abstraction between CLI and other user interfaces
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

"""Minimal user interface that commands talk to.

Commands never prompt or print help text directly; they go through a
:class:`UI`. The base class answers every question without asking
anyone, which is what the unit tests and any non-interactive caller want.
:class:`~EZT.ui.cli.CLI` is the interactive version.

**Classes**

.. autosummary::
  :nosignatures:

  UI
"""

import logging
import sys

logger = logging.getLogger(__name__)


class UI(object):
    """Non-interactive user interface, also usable as a test stub."""

    def __init__(self, force=False):
        """Create a user interface.

        Args:
          force (bool): See :attr:`force`.
        """
        self.force = force
        """Take the default answer to every question instead of asking."""
        self.default_confirm_response = True
        """What :meth:`confirm` answers when :attr:`force` is not set."""
        self._terminal_width = 80

    @property
    def terminal_width(self):
        """Columns available for help text."""
        return self._terminal_width

    def fill_usage(self,   # pylint: disable=no-self-use
                   subcommand, usage_list):
        """Format the usage lines for a subcommand, one per line.

        Args:
          subcommand (str): Subcommand name/keyword
          usage_list (list): Usage strings for this subcommand.
        Returns:
          str: Each usage string, prefixed by the subcommand.
        """
        return "\n".join("{0} {1}".format(subcommand, usage)
                         for usage in usage_list)

    def fill_examples(self, example_list):
        """Format a list of (description, example) pairs.

        Raises:
          NotImplementedError: only interactive interfaces show examples.
        """
        raise NotImplementedError("No implementation for fill_examples()")

    def confirm(self, prompt):
        """Answer a yes/no question.

        Args:
          prompt (str): The question being asked.
        Returns:
          bool: ``True`` if :attr:`force` is set, else
          :attr:`default_confirm_response`.
        """
        if self.force:
            logger.warning("Automatically agreeing to '%s'", prompt)
            return True
        return self.default_confirm_response

    def confirm_or_die(self, prompt):
        """Exit the program unless :meth:`confirm` agrees to ``prompt``.

        Raises:
          SystemExit: if the answer is no.
        """
        if not self.confirm(prompt):
            sys.exit("Aborting.")

    def get_password(self, username, host):
        """Obtain the password for ``username`` on ``host``.

        Raises:
          NotImplementedError: there is nobody to ask.
        """
        raise NotImplementedError("No implementation of get_password()")
