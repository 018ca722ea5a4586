#!/usr/bin/env python
#
# data_validation.py - Helper libraries to validate data sanity
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

"""Validation and canonicalization of user input, before any server call.

**Exceptions**

.. autosummary::
  :nosignatures:

  InvalidInputError
  ValueUnsupportedError
  ValueTooLowError
  ValueTooHighError

**Functions**

.. autosummary::
  :nosignatures:

  canonicalize_helper
  canonicalize_controller_kind
  canonicalize_disk_mode
  capacity_kb
  managed_object_id
  non_negative_float
  positive_int
  validate_int

**Constants**

.. autosummary::
  CONTROLLER_KINDS
  DISK_MODES
  MIN_CAPACITY_KB
"""

import re

MIN_CAPACITY_KB = 1024
"""Smallest disk capacity, in KiB, that the server will accept."""

DISK_MODES = [
    'append',
    'independent_nonpersistent',
    'independent_persistent',
    'nonpersistent',
    'persistent',
    'undoable',
]
"""Disk persistence modes recognized as canonical."""

_CONTROLLER_MAPPINGS = [
    ("bus *logic$", 'buslogic'),
    ("lsi *logic *sas$", 'lsilogicsas'),
    ("lsi *logic$", 'lsilogic'),
    ("(pv *scsi|para *virtual|virtual *scsi)$", 'pvscsi'),
    # Generic request for "a SCSI controller" maps onto the default variant
    ("scsi$", 'lsilogic'),
]

CONTROLLER_KINDS = sorted(set(m[1] for m in _CONTROLLER_MAPPINGS))
"""List of SCSI controller kinds recognized as canonical."""


def canonicalize_helper(label, user_input, mappings, re_flags=0):
    """Map free-form user input onto a canonical value.

    Surrounding whitespace is ignored, and the first ``(expr, canonical)``
    pair whose regexp matches at the start of the input wins.

    Args:
      label (str): What the input describes, for any error raised
      user_input (str): User-provided string
      mappings (list): ``(expr, canonical)`` pairs, tried in order.
      re_flags (int): ``re.IGNORECASE``, etc. if desired
    Returns:
      str: The canonical string, or ``None`` for empty input.
    Raises:
      ValueUnsupportedError: if nothing in ``mappings`` matches.
    """
    if not user_input:
        return None
    text = user_input.strip()
    match = next((canonical for (expr, canonical) in mappings
                  if re.match(expr, text, flags=re_flags)), None)
    if match is None:
        raise ValueUnsupportedError(
            label, user_input, sorted(set(c for (_, c) in mappings)))
    return match


def canonicalize_controller_kind(kind):
    """Turn a user's name for a SCSI controller into one we can build.

    A bare "SCSI" means the default (LSI Logic) controller.

    Args:
      kind (str): User-provided string
    Returns:
      str: One of :data:`CONTROLLER_KINDS`, or ``None`` if no kind was
      given.
    Raises:
      ValueUnsupportedError: if the kind is not recognized.
    Examples:
      ::

        >>> canonicalize_controller_kind('LSI Logic')
        'lsilogic'
        >>> canonicalize_controller_kind('LSI Logic SAS')
        'lsilogicsas'
        >>> canonicalize_controller_kind('ParaVirtual')
        'pvscsi'
        >>> canonicalize_controller_kind('SCSI')
        'lsilogic'
        >>> canonicalize_controller_kind(None)
        >>> try:  # doctest: +ELLIPSIS
        ...     canonicalize_controller_kind('ide')
        ... except ValueUnsupportedError as e:
        ...     print(e)
        Unsupported value 'ide' for SCSI controller kind...
    """
    return canonicalize_helper("SCSI controller kind", kind,
                               _CONTROLLER_MAPPINGS, re.IGNORECASE)


def canonicalize_disk_mode(mode):
    """Validate a disk persistence mode, ignoring case and dashes.

    Args:
      mode (str): User-provided string
    Returns:
      str: One of :data:`DISK_MODES`, or ``None`` if no mode was given.
    Raises:
      ValueUnsupportedError: if the mode is not recognized.
    Examples:
      ::

        >>> canonicalize_disk_mode('Persistent')
        'persistent'
        >>> canonicalize_disk_mode('independent-persistent')
        'independent_persistent'
        >>> try:  # doctest: +ELLIPSIS
        ...     canonicalize_disk_mode('sticky')
        ... except ValueUnsupportedError as e:
        ...     print(e)
        Unsupported value 'sticky' for disk mode - expected ['append', ...
    """
    return canonicalize_helper(
        "disk mode", mode,
        [(mode_name.replace("_", "[-_ ]?") + "$", mode_name)
         for mode_name in DISK_MODES],
        re.IGNORECASE)


def _in_range(value, label, minimum, maximum):
    if minimum is not None and value < minimum:
        raise ValueTooLowError(label, value, minimum)
    if maximum is not None and value > maximum:
        raise ValueTooHighError(label, value, maximum)
    return value


def validate_int(string, minimum=None, maximum=None, label=None):
    """Convert an argument to an integer within optional bounds.

    Args:
      string (str): Value to convert; anything :class:`int` accepts,
          except a float with a fractional part.
      minimum (int): Lowest valid value (optional)
      maximum (int): Highest valid value (optional)
      label (str): What the value describes, for any error raised

    Returns:
      int: The validated integer.

    Raises:
      ValueUnsupportedError: if ``string`` isn't an integer at all
      ValueTooLowError: if the value is below ``minimum``
      ValueTooHighError: if the value is above ``maximum``

    Examples:
      ::

        >>> validate_int('1')
        1
        >>> try:
        ...     validate_int('foo', label='x')
        ... except ValueUnsupportedError as e:
        ...     print(e)
        Unsupported value 'foo' for x - expected integer
        >>> try:
        ...     validate_int('100', label='x', maximum=10)
        ... except ValueTooHighError as e:
        ...     print(e)
        Value '100' for x is too high - must be at most 10
    """
    label = label or "input"
    # int() would silently truncate 1500.9 to 1500
    if isinstance(string, float) and not string.is_integer():
        raise ValueUnsupportedError(label, string, "integer")
    try:
        value = int(string)
    except (TypeError, ValueError, OverflowError):
        raise ValueUnsupportedError(label, string, "integer")
    return _in_range(value, label, minimum, maximum)


def positive_int(string, label=None):
    """Validate a count or port number, which must be 1 or more.

    Examples:
      ::

        >>> positive_int('443')
        443
        >>> try:
        ...     positive_int('0')
        ... except ValueTooLowError as e:
        ...     print(e)
        Value '0' for input is too low - must be at least 1
    """
    return validate_int(string, minimum=1, label=label)


def capacity_kb(string):
    """Validate a disk capacity in KiB.

    Args:
      string (str): Capacity to validate.
    Returns:
      int: The capacity, at least :data:`MIN_CAPACITY_KB`.
    Raises:
      ValueUnsupportedError: if ``string`` isn't an integer
      ValueTooLowError: if the capacity is below :data:`MIN_CAPACITY_KB`
    Examples:
      ::

        >>> capacity_kb('20971520')
        20971520
        >>> try:
        ...     capacity_kb('1023')
        ... except ValueTooLowError as e:
        ...     print(e)
        Value '1023' for disk capacity (KiB) is too low - must be at least 1024
    """
    return validate_int(string, minimum=MIN_CAPACITY_KB,
                        label="disk capacity (KiB)")


def non_negative_float(string, label=None):
    """Validate a duration or other real number that must be 0 or more.

    Examples:
      ::

        >>> non_negative_float('2.5')
        2.5
        >>> try:
        ...     non_negative_float('-1', label='poll interval')
        ... except ValueTooLowError as e:
        ...     print(e)
        Value '-1.0' for poll interval is too low - must be at least 0
    """
    label = label or "input"
    try:
        value = float(string)
    except (TypeError, ValueError):
        raise ValueUnsupportedError(label, string, "number")
    return _in_range(value, label, 0, None)


def managed_object_id(string):
    """Validate the ID of a server-side object, such as ``task-1234``.

    Raises:
      InvalidInputError: if the ID is empty or has characters that never
          appear in one, such as whitespace or ``/``.
    Returns:
      str: The ID with surrounding whitespace removed.
    Examples:
      ::

        >>> managed_object_id("  task-1234\\n")
        'task-1234'
        >>> try:
        ...     managed_object_id('task 1234')
        ... except InvalidInputError as e:
        ...     print(e)
        'task 1234' is not a valid managed object ID
    """
    string = string.strip()
    if not re.match(r"[\w.:-]+$", string):
        raise InvalidInputError("'{0}' is not a valid managed object ID"
                                .format(string))
    return string


class InvalidInputError(ValueError):
    """The user asked for something that cannot be done as stated."""


class ValueUnsupportedError(InvalidInputError):
    """A value outside of what is supported was given.

    Args:
      value_type (str): What the value describes, e.g. "disk mode"
      actual_value (object): The value given
      expected_value (object): The valid value(s), or the violated bound
    """

    TEMPLATE = "Unsupported value '{actual}' for {kind} - expected {expected}"

    def __init__(self, value_type, actual_value, expected_value):
        """Create an instance of this class."""
        self.value_type = value_type
        self.actual_value = actual_value
        self.expected_value = expected_value
        super(ValueUnsupportedError, self).__init__(str(self))

    def __str__(self):
        """Human-readable string representation."""
        return self.TEMPLATE.format(actual=self.actual_value,
                                    kind=self.value_type,
                                    expected=self.expected_value)


class ValueTooLowError(ValueUnsupportedError):
    """A number was below the lowest supported value."""

    TEMPLATE = ("Value '{actual}' for {kind} is too low"
                " - must be at least {expected}")


class ValueTooHighError(ValueUnsupportedError):
    """A number was above the highest supported value."""

    TEMPLATE = ("Value '{actual}' for {kind} is too high"
                " - must be at most {expected}")


if __name__ == "__main__":   # pragma: no cover
    import doctest
    doctest.testmod()
