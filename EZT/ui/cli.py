#!/usr/bin/env python
#
# cli.py - CLI handling for EZT
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
#
# PYTHON_ARGCOMPLETE_OK

"""Command-line front end for EZT, the eager-zeroed thick disk provisioner.

The :class:`CLI` builds one argparse sub-parser per registered
:class:`~EZT.commands.Command`, copies the parsed arguments onto the
command instance, runs it, and turns whatever went wrong into an exit
status.

**Classes**

.. autosummary::
  :nosignatures:

  CLI
  CLILoggingFormatter

**Functions**

.. autosummary::
  :nosignatures:

  main
"""

import argparse
import getpass
import logging
import os
import re
import sys
import textwrap
from shutil import get_terminal_size

from colorlog import ColoredFormatter
from pyVmomi import vmodl
from verboselogs import NOTICE, SPAM, VERBOSE

from EZT import __version_long__
from EZT.data_validation import InvalidInputError
from EZT.commands import command_classes
from EZT.vsphere.tasks import fault_message
from .ui import UI

logger = logging.getLogger(__name__)

DEFAULT_TERMINAL_WIDTH = 80

VERBOSITY_LEVELS = (
    logging.CRITICAL,
    logging.ERROR,
    logging.WARNING,
    NOTICE,
    logging.INFO,
    VERBOSE,
    logging.DEBUG,
    SPAM,
)
"""Logging levels selectable with ``-q`` and ``-v``, quietest first."""

GLOBAL_ARGS = ("_force", "_quietude", "_subcommand", "_verbosity")
"""Parser destinations that belong to the CLI rather than to a command."""

USAGE_GROUP = re.compile(r"""
  \(.*?\)+   |  # (possibly nested) parenthesized choices
  \[.*?\]+   |  # (possibly nested) optional arguments
  -\S+\s+\S+ |  # option and its metavar
  \S+           # positional argument
""", re.VERBOSE)

EXAMPLE_PARAM = re.compile(r"""
  -\S+[ =]\S+   |  # option and its value
  -\S+[ =]".*?" |  # option and its quoted value
  \S+              # positional argument
""", re.VERBOSE)


def _wrap_groups(groups, first_line, indent, limit, continuation=""):
    """Lay out word groups over as many lines as needed.

    A group is never split. A new line, starting with ``indent``, begins
    whenever the next group would bring the current line to ``limit``
    columns; the line being closed gets ``continuation`` appended.

    Args:
      groups (list): Strings to lay out, in order.
      first_line (str): Text the first line starts with.
      indent (str): Text each subsequent line starts with.
      limit (int): Column count no line may reach.
      continuation (str): Marker for lines that continue on the next.

    Yields:
      str: Each output line.

    Examples:
      ::

        >>> list(_wrap_groups(["a", "bb", "ccc"], "$", "  ", 7))
        ['$ a bb', '   ccc']
        >>> list(_wrap_groups(["a", "bb", "ccc"], "$", "  ", 7, " \\\\"))
        ['$ a bb \\\\', '   ccc']
    """
    line = first_line
    for group in groups:
        if len(line) + len(group) >= limit:
            yield line + continuation
            line = indent
        line += " " + group
    yield line


class CLI(UI):
    """Command-line user interface for EZT.

    .. autosummary::
      :nosignatures:

      adjust_verbosity
      confirm
      create_parser
      create_subparsers
      fill_examples
      fill_usage
      get_password
      main
      parse_args
      run
      set_verbosity
      terminal_width
    """

    def __init__(self, terminal_width=None):
        """Create CLI handler instance.

        Args:
          terminal_width (int): (optional) Set the terminal width for this
              CLI, independent of the actual terminal in use.
        """
        super(CLI, self).__init__(force=True)
        self.input = input
        self.getpass = getpass.getpass
        self.handler = None
        self.master_logger = None
        self._terminal_width = terminal_width

        self.create_parser()
        self.create_subparsers()
        try:
            import argcomplete
            argcomplete.autocomplete(self.parser)
        except ImportError:
            pass

    @property
    def terminal_width(self):
        """The width of the terminal in columns."""
        if self._terminal_width is None:
            try:
                columns = get_terminal_size().columns
            except ValueError:
                # "underlying buffer has been detached"
                columns = 0
            self._terminal_width = (columns if columns > 0
                                    else DEFAULT_TERMINAL_WIDTH)
        return self._terminal_width

    def _wrap_text(self, text, indent=""):
        """Wrap prose to the terminal, never breaking at hyphens."""
        return textwrap.wrap(text,
                             width=self.terminal_width - 1,
                             initial_indent=indent,
                             subsequent_indent=indent,
                             break_on_hyphens=False)

    def fill_usage(self, subcommand, usage_list):
        """Pretty-print a list of usage strings for an EZT subcommand.

        A ``ezt subcommand --help`` line always comes first. Each usage
        string is then wrapped so that no bracketed option group is split;
        continuation lines line up after the subcommand name unless the
        terminal is too narrow for that.

        Args:
          subcommand (str): Subcommand name/keyword
          usage_list (list): List of usage strings for this subcommand.
        Returns:
          str: All usage strings, each appropriately wrapped to the
          :attr:`terminal_width` value.

        Examples:
          ::

            >>> print(CLI(50).fill_usage('task-status',
            ...       ["SERVER TASK_ID [-u USERNAME] [-w]"]))
            <BLANKLINE>
              ezt task-status --help
              ezt <opts> task-status SERVER TASK_ID
                                     [-u USERNAME] [-w]
        """
        width = self.terminal_width
        prefix = "  ezt <opts> " + subcommand
        lines = ["", "  ezt {0} --help".format(subcommand)]
        for usage in usage_list:
            groups = USAGE_GROUP.findall(usage)
            if len(prefix) + max(len(g) for g in groups) >= width:
                indent = " " * len("  ezt")
            else:
                indent = " " * len(prefix)
            lines.extend(_wrap_groups(groups, prefix, indent, width))
        return "\n".join(lines)

    def fill_examples(self, example_list):
        r"""Pretty-print a set of usage examples.

        Args:
          example_list (list): List of (description, CLI example) tuples.

        Returns:
          str: Concatenation of examples, each wrapped appropriately to the
          :attr:`terminal_width` value. CLI examples will be wrapped with
          backslashes and a hanging indent.

        Examples:
          ::

            >>> print(CLI(68).fill_examples([
            ...  ("Add a 20 GiB disk to VM 'myvm' on datastore 'ds0' of"
            ...   " vCenter server 192.0.2.100, as user 'admin'.",
            ...   'ezt add-disk 192.0.2.100 myvm ds0 20971520 -u admin'
            ...   ' -p admin -c pvscsi'),
            ... ]))
            Examples:
              Add a 20 GiB disk to VM 'myvm' on datastore 'ds0' of vCenter
              server 192.0.2.100, as user 'admin'.
            <BLANKLINE>
                ezt add-disk 192.0.2.100 myvm ds0 20971520 -u admin -p admin \
                    -c pvscsi
        """
        blocks = []
        for (description, example) in example_list:
            lines = self._wrap_text(description, indent="  ")
            lines.append("")
            lines.extend(_wrap_groups(EXAMPLE_PARAM.findall(example),
                                      "   ", "       ",
                                      self.terminal_width - 4, " \\"))
            blocks.append("\n".join(lines))
        return "Examples:\n" + "\n\n".join(blocks)

    def adjust_verbosity(self, delta):
        """Set the logging verbosity relative to the EZT default of NOTICE.

        Args:
          delta (int): Number of steps along :data:`VERBOSITY_LEVELS`;
            positive is more verbose, negative is quieter. Out-of-range
            values stop at the quietest or noisiest level.
        """
        index = VERBOSITY_LEVELS.index(NOTICE) + delta
        index = max(0, min(index, len(VERBOSITY_LEVELS) - 1))
        self.set_verbosity(VERBOSITY_LEVELS[index])

    def set_verbosity(self, level):
        """Enable logging to stderr at the given level.

        Args:
          level (int): Logging level as defined in :mod:`logging`.
        """
        if self.master_logger is None:
            self.handler = logging.StreamHandler()
            self.master_logger = logging.getLogger('EZT')
            self.master_logger.addHandler(self.handler)
        self.handler.setLevel(level)
        self.handler.setFormatter(CLILoggingFormatter(level))
        self.master_logger.setLevel(level)
        logger.debug("Verbosity level is now %s",
                     logging.getLevelName(level))

    def _stop_logging(self):
        """Detach the handler installed by :meth:`set_verbosity`."""
        if self.master_logger is None:
            return
        self.master_logger.removeHandler(self.handler)
        self.handler.close()
        self.master_logger = None
        self.handler = None

    def run(self, argv):
        """Parse the given CLI args, then act on them with :meth:`main`.

        Args:
          argv (list): The CLI argv value (not including argv[0])
        Returns:
          int: Return code from :meth:`main`
        """
        return self.main(self.parse_args(argv))

    def confirm(self, prompt):
        """Ask the user a yes/no question, defaulting to yes.

        Auto-accepts if :attr:`force` is set to ``True``.

        Args:
          prompt (str): Message to prompt the user with
        Returns:
          bool: ``True`` (user accepts) or ``False`` (user declines)
        """
        if self.force:
            logger.warning("Automatically agreeing to '%s'", prompt)
            return True

        wrapped = []
        for line in prompt.splitlines():
            wrapped.extend(self._wrap_text(line))
        question = "{0} [y] ".format("\n".join(wrapped))

        while True:
            answer = self.input(question).strip().lower()
            if answer in ("", "y"):
                return True
            if answer == "n":
                return False
            print("Please enter 'y' or 'n'")

    def get_password(self, username, host):
        """Read a password without echoing it.

        Args:
          username (str): Username the password is associated with
          host (str): Host the password is associated with

        Raises:
          InvalidInputError: if :attr:`force` is ``True``, as nobody is
              there to type it.
        Returns:
          str: Password string
        """
        if self.force:
            raise InvalidInputError("No password specified for {0}@{1}"
                                    .format(username, host))
        return self.getpass("Password for {0}@{1}: ".format(username, host))

    def create_parser(self):
        """Create :attr:`parser` object for global ``ezt`` command.

        Includes a number of globally applicable CLI options.
        """
        # argparse wraps its help text to $COLUMNS
        os.environ['COLUMNS'] = str(self.terminal_width)
        about = textwrap.fill(
            "A tool for adding eager-zeroed thick virtual disks to VMs "
            "managed by VMware vCenter or ESXi.",
            width=self.terminal_width - 1)

        self.parser = argparse.ArgumentParser(
            prog="ezt",
            usage="""
  ezt --help
  ezt --version
  ezt <command> --help
  ezt <options> <command> <command-options>""",
            description=__version_long__ + "\n" + about,
            formatter_class=argparse.RawDescriptionHelpFormatter)

        self.parser.add_argument('-V', '--version', action='version',
                                 version=__version_long__)
        self.parser.add_argument('-f', '--force', dest='_force',
                                 action='store_true',
                                 help="Perform requested actions without"
                                 " prompting for confirmation")
        noise = self.parser.add_mutually_exclusive_group()
        noise.add_argument('-q', '--quiet', dest='_quietude',
                           action='count', default=0,
                           help="Decrease verbosity of the program"
                           " (repeatable)")
        noise.add_argument('-v', '--verbose', dest='_verbosity',
                           action='count', default=0,
                           help="Increase verbosity of the program"
                           " (repeatable)")

        self.subparsers = self.parser.add_subparsers(prog="ezt",
                                                     dest='_subcommand',
                                                     metavar="<command>",
                                                     title="commands")
        self.subparser_lookup = {}

    def create_subparsers(self):
        """Give each class in :data:`EZT.commands.command_classes` a parser.

        Each parser keeps a reference to its command instance through its
        ``instance`` default, which is how :meth:`main` finds it again.
        """
        for klass in command_classes:
            klass(self).create_subparser()

    def add_subparser(self, title, parent=None, aliases=None, **kwargs):
        """Create a subparser under the specified parent.

        Args:
          title (str): Canonical keyword for this subparser
          parent (object): Subparser grouping object returned by
              :meth:`ArgumentParser.add_subparsers`
          aliases (list): Aliases for ``title``.
          kwargs (dict): Passed through to :meth:`parent.add_parser`

        Returns:
          object: Subparser object
        """
        names = [title] + list(aliases or [])
        if aliases:
            kwargs['aliases'] = aliases
        parser = (parent or self.subparsers).add_parser(title, **kwargs)
        for name in names:
            self.subparser_lookup[name] = parser
        return parser

    def parse_args(self, argv):
        """Parse the given CLI arguments into a namespace object.

        With no terminal to prompt on, ``--force`` is implied.

        Args:
          argv (list): List of CLI arguments, not including argv0
        Returns:
          argparse.Namespace: Parser namespace object
        """
        args = self.parser.parse_args(argv)
        if not (sys.stdin.isatty() and sys.stdout.isatty()):
            args._force = True  # pylint: disable=protected-access
        return args

    @staticmethod
    def args_to_dict(args):
        """Convert args to a dict holding only the command's own arguments.

        Args:
          args (argparse.Namespace): Namespace from :meth:`parse_args`.
        Returns:
          dict: Dictionary of arg to value
        """
        return dict((key, value) for (key, value) in vars(args).items()
                    if key not in GLOBAL_ARGS)

    @staticmethod
    def set_instance_attributes(arg_dict):
        """Copy parsed arguments onto ``arg_dict["instance"]``.

        Positional (UPPERCASE) arguments become lowercase attributes and are
        set before any options. Arguments left unset (``None``) are skipped
        so that the command keeps its own defaults.

        Args:
          arg_dict (dict): Dictionary of (attribute, value).
        Raises:
          InvalidInputError: if attributes are not validly set.
        """
        instance = arg_dict["instance"]
        positional_first = sorted(arg_dict.items(),
                                  key=lambda item: not item[0][0].isupper())
        for (arg, value) in positional_first:
            if arg == "instance" or value is None:
                continue
            setattr(instance, arg.lower(), value)

    @staticmethod
    def exit_status_for(exc):
        """Work out what to tell the user about an EnvironmentError.

        Args:
          exc (EnvironmentError): Error raised by the command.
        Returns:
          tuple: (message, exit status). The status is the error's
          ``errno`` where it has one, else 1.
        """
        if exc.errno is None:
            if exc.strerror:
                return exc.strerror, 1
            return (exc.args[0] if exc.args else exc), 1
        if exc.filename is not None:
            return "{0}: {1}".format(exc.filename, exc.strerror), exc.errno
        return exc, exc.errno

    def main(self, args):
        """Run the command selected by ``args``.

        Verbosity comes from ``-v``/``-q``; the arguments are then copied
        onto the command instance with :meth:`set_instance_attributes` and
        the command is run and finished. Logging is torn down afterwards
        whatever happens.

        Args:
          args (argparse.Namespace): Parser namespace object returned from
              :meth:`parse_args`.

        Returns:
          int: Exit code for the EZT executable.

           * 0 on successful completion
           * 1 (or the relevant errno value) on runtime error
           * 2 on input error (parser error,
             :class:`~EZT.data_validation.InvalidInputError`, etc.)
        """
        # pylint: disable=protected-access
        self.force = args._force
        self.adjust_verbosity(args._verbosity - args._quietude)

        if not args._subcommand:
            self.parser.error("too few arguments")
        subparser = self.subparser_lookup[args._subcommand]

        try:
            self.set_instance_attributes(self.args_to_dict(args))
            args.instance.run()
            args.instance.finished()
        except InvalidInputError as exc:
            subparser.error(exc)
        except EnvironmentError as exc:
            message, status = self.exit_status_for(exc)
            print(message)
            sys.exit(status)
        except vmodl.MethodFault as exc:
            print("Server reported an error: {0}".format(fault_message(exc)))
            sys.exit(1)
        except (KeyboardInterrupt, EOFError):
            sys.exit("\nAborted by user.")
        finally:
            args.instance.destroy()
            self._stop_logging()
        return 0


class CLILoggingFormatter(ColoredFormatter):
    r"""Colorized log formatter that shows more context at higher verbosity.

    At the default NOTICE level only the level name precedes the message.
    INFO adds the module, VERBOSE the function, and DEBUG a timestamp and
    line number.

    Args:
      verbosity (int): Logging level as defined by :mod:`logging`.

    Examples::

      >>> record = logging.LogRecord(
      ... "EZT.doctests",   # logger name
      ... logging.INFO,     # message level
      ... "/fakemodule.py", # file reporting the message
      ... 22,               # line number in file
      ... "Hello world!",   # message text
      ... None,             # %-style args for message
      ... None,             # exception info
      ... "test_func")      # function reporting the message
      >>> record.created = 0
      >>> record.msecs = 0
      >>> CLILoggingFormatter(NOTICE).format(record)
      '\x1b[32mINFO    :\x1b[0m Hello world!'
      >>> CLILoggingFormatter(logging.INFO).format(record) # doctest:+ELLIPSIS
      '\x1b[32mINFO    : fakemodule ... Hello world!'
      >>> CLILoggingFormatter(VERBOSE).format(record) # doctest:+ELLIPSIS
      '\x1b[32mINFO    : fakemodule ... test_func()... Hello world!'
      >>> CLILoggingFormatter(logging.DEBUG).format(record) # doctest:+ELLIPSIS
      '\x1b[32mINFO ...:00.0 : fakemodule ...22...test_func()...Hello world!'
    """

    LOG_COLORS = {
        'SPAM':     '',
        'DEBUG':    'blue',
        'VERBOSE':  'cyan',
        'INFO':     'green',
        'NOTICE':   'yellow',
        'WARNING':  'red',
        'ERROR':    'fg_white,bg_red',
        'CRITICAL': 'purple,bold',
    }

    FIELDS = (
        (logging.CRITICAL, "%(levelname)-7s"),
        (logging.DEBUG, "%(asctime)s.%(msecs)d"),
        # wide enough for "data_validation"
        (logging.INFO, "%(module)-15s"),
        (logging.DEBUG, "%(lineno)4d"),
        (VERBOSE, "%(funcName)31s()"),
    )
    """(quietest verbosity that shows the field, field) in display order."""

    def __init__(self, verbosity=logging.INFO):
        """Create formatter for EZT log output with the given verbosity."""
        fields = [field for (level, field) in self.FIELDS
                  if verbosity <= level]
        super(CLILoggingFormatter, self).__init__(
            "%(log_color)s" + " : ".join(fields) + " :%(reset)s %(message)s",
            datefmt="%H:%M:%S" if verbosity <= logging.DEBUG else None,
            reset=False,
            log_colors=self.LOG_COLORS)


def main():
    """Launch EZT from the CLI."""
    CLI().run(sys.argv[1:])


if __name__ == "__main__":   # pragma: no cover
    main()
