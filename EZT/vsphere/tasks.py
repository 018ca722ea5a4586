#!/usr/bin/env python
#
# tasks.py - Submitting and tracking vSphere reconfiguration tasks
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

"""Submission and tracking of long-running server tasks.

A reconfiguration request returns a ``vim.Task`` immediately; the work
happens on the server. :class:`TaskTracker` either hands that task straight
back to the caller (:meth:`~TaskTracker.submit_and_forget`) or polls it
until it reaches a terminal state (:meth:`~TaskTracker.await_completion`).

Failures are never retried here. A task that ends in ``error`` becomes a
:class:`~EZT.vsphere.errors.ProvisioningFailedError` carrying the server's
message, and transport failures become
:class:`~EZT.vsphere.errors.RemoteUnavailableError`.

**Classes**

.. autosummary::
  :nosignatures:

  ProgressReporter
  TaskStatus
  TaskTracker

**Functions**

.. autosummary::
  :nosignatures:

  fault_message
  task_id

**Constants**

.. autosummary::
  MIN_POLL_INTERVAL
  TASK_POLL_INTERVAL
"""

import logging
import time
from collections import namedtuple

from pyVmomi import vim, vmodl
from verboselogs import NOTICE

from EZT.data_validation import InvalidInputError, non_negative_float
from .errors import (
    ProvisioningFailedError, RemoteUnavailableError, TRANSPORT_ERRORS,
)

logger = logging.getLogger(__name__)

TASK_POLL_INTERVAL = 1.0
"""Default number of seconds to wait between task status refreshes."""

MIN_POLL_INTERVAL = 0.5
"""The server does not update task state more often than this (seconds)."""

TaskStatus = namedtuple('TaskStatus',
                        ['state', 'progress', 'error_message', 'result'])
"""Snapshot of a task taken by :meth:`TaskTracker.refresh_status`."""


def task_id(task):
    """Get a short identifier for the given task, suitable for messages.

    Args:
      task (vim.Task): Task object.
    Returns:
      str: Managed object ID such as ``task-123``, if known.
    """
    return str(getattr(task, '_moId', None) or task)


def fault_message(fault):
    """Extract the human-readable message from a server fault.

    Args:
      fault (vmodl.MethodFault): Fault reported by the server, or ``None``.
    Returns:
      str: Localized message text.
    """
    if fault is None:
        return "unknown error"
    for attr in ('msg', 'localizedMessage', 'faultMessage'):
        value = getattr(fault, attr, None)
        if value and isinstance(value, str):
            return value
    return str(fault)


def _normalize_progress(value):
    """Coerce a reported progress value into an int from 0 to 100."""
    try:
        progress = int(value)
    except (TypeError, ValueError):
        return 0
    return max(0, min(100, progress))


class ProgressReporter(object):
    """Callback that logs task progress whenever it advances.

    Repeated or decreasing values are ignored, so the same percentage is
    never logged twice no matter how often the task is polled.

    Args:
      label (str): Text identifying the task in log messages.
      level (int): Logging level for the progress messages.
    """

    def __init__(self, label, level=NOTICE):
        """Create a reporter for the given task label."""
        self.label = label
        self.level = level
        self.last_progress = None
        """Most recently reported percentage, or ``None``."""

    def __call__(self, progress):
        """Report the given percentage if it is new.

        Args:
          progress (int): Percent complete, 0 to 100.
        """
        if self.last_progress is not None and progress <= self.last_progress:
            return
        self.last_progress = progress
        logger.log(self.level, "%s: %d%% complete", self.label, progress)


class TaskTracker(object):
    """Submits configuration changes and follows the resulting tasks.

    Args:
      poll_interval (float): Seconds between status refreshes while
          waiting for a task.
    """

    def __init__(self, poll_interval=TASK_POLL_INTERVAL):
        """Create a tracker with the given polling interval."""
        self._poll_interval = TASK_POLL_INTERVAL
        self.poll_interval = poll_interval

    @property
    def poll_interval(self):
        """Seconds to wait between task status refreshes.

        Values below :data:`MIN_POLL_INTERVAL` are raised to that minimum.

        Raises:
          ValueTooLowError: if set to a negative value.
        """
        return self._poll_interval

    @poll_interval.setter
    def poll_interval(self, value):
        value = non_negative_float(value, label="poll interval")
        if value < MIN_POLL_INTERVAL:
            logger.notice("Poll interval %s is faster than the server"
                          " updates task status; using %s seconds instead",
                          value, MIN_POLL_INTERVAL)
            value = MIN_POLL_INTERVAL
        self._poll_interval = value

    def submit(self, vm, device_changes, stage=None):
        """Submit a configuration change against the given VM.

        Args:
          vm (vim.VirtualMachine): VM to reconfigure.
          device_changes (list): Non-empty, ordered list of
              ``vim.vm.device.VirtualDeviceSpec`` requests.
          stage (str): Workflow stage, used to report a server fault
              raised at submission as a ``ProvisioningFailedError``.
              If unset, such faults propagate unchanged.
        Returns:
          vim.Task: Newly created task.
        Raises:
          InvalidInputError: if ``device_changes`` is empty.
          ProvisioningFailedError: if the server rejects the request
              outright and ``stage`` is set.
          RemoteUnavailableError: if the server cannot be reached.
        """
        if not device_changes:
            raise InvalidInputError("A configuration change requires at"
                                    " least one device change request")
        spec = vim.vm.ConfigSpec()
        spec.deviceChange = list(device_changes)
        try:
            task = vm.ReconfigVM_Task(spec=spec)
        except TRANSPORT_ERRORS as exc:
            raise RemoteUnavailableError("submit configuration change", exc)
        except vmodl.MethodFault as fault:
            if stage is None:
                raise
            raise ProvisioningFailedError(stage, fault_message(fault))
        logger.verbose("Submitted %d device change(s) to VM %s as task %s",
                       len(spec.deviceChange), vm, task_id(task))
        return task

    def submit_and_forget(self, vm, device_changes, stage=None):
        """Submit a configuration change without waiting for it.

        The caller receives the live task and may poll it later with
        :meth:`refresh_status` or :meth:`await_completion`.

        For the parameters and exceptions, see :meth:`submit`.

        Returns:
          vim.Task: Newly created (probably still running) task.
        """
        task = self.submit(vm, device_changes, stage=stage)
        logger.info("Task %s submitted; not waiting for it to complete",
                    task_id(task))
        return task

    def refresh_status(self, task):
        """Fetch the current status of the given task from the server.

        Args:
          task (vim.Task): Task to check.
        Returns:
          TaskStatus: Current state, progress (0 if unknown),
          error message (``None`` unless the task failed) and result.
        Raises:
          RemoteUnavailableError: if the server cannot be reached.
        """
        try:
            info = task.info
        except TRANSPORT_ERRORS as exc:
            raise RemoteUnavailableError("refresh status of task {0}"
                                         .format(task_id(task)), exc)
        error_message = None
        if info.state == vim.TaskInfo.State.error:
            error_message = fault_message(info.error)
        status = TaskStatus(info.state, _normalize_progress(info.progress),
                            error_message, info.result)
        logger.spam("Task %s status: %s", task_id(task), status)
        return status

    def await_completion(self, task, stage, on_progress=None):
        """Block until the given task succeeds or fails.

        The task is refreshed once per :attr:`poll_interval`. Each refresh's
        progress is passed to ``on_progress``; success is reported as 100.
        Polling stops as soon as a terminal state is seen.

        Args:
          task (vim.Task): Task to wait for.
          stage (str): Workflow stage this task belongs to, for errors.
          on_progress (callable): Optional callback taking an int
              percentage.
        Returns:
          object: The task's result, if any.
        Raises:
          ProvisioningFailedError: if the task ends in ``error``.
          RemoteUnavailableError: if the server cannot be reached.
        """
        logger.verbose("Waiting for task %s (%s stage) to complete",
                       task_id(task), stage)
        while True:
            status = self.refresh_status(task)
            if status.state == vim.TaskInfo.State.success:
                if on_progress is not None:
                    on_progress(100)
                logger.verbose("Task %s completed successfully",
                               task_id(task))
                return status.result
            if status.state == vim.TaskInfo.State.error:
                logger.verbose("Task %s failed: %s",
                               task_id(task), status.error_message)
                raise ProvisioningFailedError(stage, status.error_message)
            if on_progress is not None:
                on_progress(status.progress)
            time.sleep(self.poll_interval)
