#!/usr/bin/env python
#
# utilities.py - General utility functions
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

"""Formatting helpers shared by the EZT commands.

**Functions**

.. autosummary::
  :nosignatures:

  datastore_path
  pretty_bytes
"""

BINARY_UNITS = ("B", "KiB", "MiB", "GiB", "TiB", "PiB")


def pretty_bytes(byte_value, base_shift=0):
    """Express a size in the largest binary unit that keeps it at least 1.

    Args:
      byte_value (float): Size to format.
      base_shift (int): Unit ``byte_value`` is given in, as an index into
          :data:`BINARY_UNITS` (0 = bytes, 1 = KiB, 2 = MiB, etc.)

    Returns:
      str: Size with up to four significant digits, e.g. "1.5 GiB".

    Examples:
      ::

        >>> pretty_bytes(512)
        '512 B'
        >>> pretty_bytes(1024, 1)
        '1 MiB'
        >>> pretty_bytes(20971520, 1)
        '20 GiB'
        >>> pretty_bytes(65547)
        '64.01 KiB'
        >>> pretty_bytes(.001, 1)
        '1 B'
        >>> pretty_bytes(100, -1)
        Traceback (most recent call last):
            ...
        ValueError: base_shift must not be negative
    """
    if base_shift < 0:
        raise ValueError("base_shift must not be negative")
    value = float(byte_value)
    unit = base_shift
    while unit < len(BINARY_UNITS) - 1 and value >= 1024:
        value, unit = value / 1024, unit + 1
    while unit > 0 and value < 1:
        value, unit = value * 1024, unit - 1
    if unit == 0:
        # no fractional bytes
        value = round(value)
    return "{0:.4g} {1}".format(value, BINARY_UNITS[unit])


def datastore_path(datastore_name, path=None):
    """Build a datastore-relative path such as ``[ds0] vm/disk.vmdk``.

    With no ``path``, returns only the bracketed datastore name, which the
    server expands into a concrete file path of its own choosing.

    Args:
      datastore_name (str): Name of the datastore.
      path (str): Optional path relative to the datastore root.
    Returns:
      str: Datastore path string.
    Examples:
      ::

        >>> datastore_path("ds0")
        '[ds0]'
        >>> datastore_path("ds0", "myvm/myvm_1.vmdk")
        '[ds0] myvm/myvm_1.vmdk'
    """
    if not path:
        return "[{0}]".format(datastore_name)
    return "[{0}] {1}".format(datastore_name, path)


if __name__ == "__main__":   # pragma: no cover
    import doctest
    doctest.testmod()
