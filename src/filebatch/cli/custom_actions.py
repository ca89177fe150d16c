"""Custom argparse actions for tracking explicitly provided arguments.

Flags are the highest-priority configuration layer, but only when the user
actually typed them: an argparse default must never mask a value coming
from the environment or a config file. These actions record the
destination of every flag that was given in ``namespace._provided_args``.
"""

from __future__ import annotations

#  Copyright (c) 2025 Tom Villani, Ph.D.
import argparse
from typing import Any, Callable, Dict, Iterable, Optional, Sequence, Union


def _mark_provided(namespace: argparse.Namespace, dest: str) -> None:
    if not hasattr(namespace, "_provided_args"):
        namespace._provided_args = set()
    namespace._provided_args.add(dest)


class TrackingStoreAction(argparse.Action):
    """Custom action that tracks whether an argument was explicitly provided.

    This action stores both the value and metadata about whether the argument
    was provided by the user, making it easier to distinguish between default
    values and user-provided values that happen to match the default.
    """

    def __init__(
        self,
        option_strings: Sequence[str],
        dest: str,
        nargs: Optional[Union[int, str]] = None,
        const: Optional[Any] = None,
        default: Optional[Any] = None,
        type: Optional[Callable[[str], Any]] = None,
        choices: Optional[Sequence[Any]] = None,
        required: bool = False,
        help: Optional[str] = None,
        metavar: Optional[Union[str, tuple[str, ...]]] = None,
    ) -> None:
        """Initialize the tracking store action."""
        super().__init__(
            option_strings=option_strings,
            dest=dest,
            nargs=nargs,
            const=const,
            default=default,
            type=type,
            choices=choices,
            required=required,
            help=help,
            metavar=metavar,
        )

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: Union[str, Sequence[Any], None],
        option_string: Optional[str] = None,
    ) -> None:
        """Store the value and mark it as explicitly provided."""
        setattr(namespace, self.dest, values)
        _mark_provided(namespace, self.dest)


class TrackingStoreConstAction(argparse.Action):
    """Custom store_const action that tracks whether the flag was explicitly provided.

    Used for shorthand flags such as ``--json``, which sets the output
    format to a fixed value.
    """

    def __init__(
        self,
        option_strings: Sequence[str],
        dest: str,
        const: Any = None,
        default: Any = None,
        required: bool = False,
        help: Optional[str] = None,
    ) -> None:
        """Initialize the tracking store_const action."""
        super().__init__(
            option_strings=option_strings,
            dest=dest,
            nargs=0,
            const=const,
            default=default,
            required=required,
            help=help,
        )

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: Union[str, Sequence[Any], None],
        option_string: Optional[str] = None,
    ) -> None:
        """Store the constant and mark as explicitly provided."""
        setattr(namespace, self.dest, self.const)
        _mark_provided(namespace, self.dest)


class TrackingStoreTrueAction(TrackingStoreConstAction):
    """Custom store_true action that tracks whether the flag was explicitly provided."""

    def __init__(
        self,
        option_strings: Sequence[str],
        dest: str,
        default: bool = False,
        required: bool = False,
        help: Optional[str] = None,
    ) -> None:
        """Initialize the tracking store_true action."""
        super().__init__(option_strings, dest, const=True, default=default, required=required, help=help)


class TrackingStoreFalseAction(TrackingStoreConstAction):
    """Custom store_false action that tracks whether the flag was explicitly provided."""

    def __init__(
        self,
        option_strings: Sequence[str],
        dest: str,
        default: bool = True,
        required: bool = False,
        help: Optional[str] = None,
    ) -> None:
        """Initialize the tracking store_false action."""
        super().__init__(option_strings, dest, const=False, default=default, required=required, help=help)


class TrackingBoundedIntAction(argparse.Action):
    """Action that validates integers against a lower bound, with tracking.

    Parameters
    ----------
    minimum : int, default 1
        Smallest accepted value

    """

    def __init__(
        self,
        option_strings: Sequence[str],
        dest: str,
        minimum: int = 1,
        default: Optional[int] = None,
        required: bool = False,
        help: Optional[str] = None,
        metavar: Optional[Union[str, tuple[str, ...]]] = None,
    ) -> None:
        """Initialize the tracking bounded int action."""
        self.minimum = minimum
        super().__init__(
            option_strings=option_strings,
            dest=dest,
            default=default,
            required=required,
            help=help,
            metavar=metavar,
        )

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: Union[str, Sequence[Any], None],
        option_string: Optional[str] = None,
    ) -> None:
        """Validate and store the integer, marking it as explicitly provided."""
        try:
            number = int(str(values))
        except ValueError:
            parser.error(f"argument {option_string}: invalid integer value: '{values}'")
        if number < self.minimum:
            parser.error(f"argument {option_string}: must be >= {self.minimum}, got {number}")

        setattr(namespace, self.dest, number)
        _mark_provided(namespace, self.dest)


def get_provided_values(namespace: argparse.Namespace, names: Iterable[str]) -> Dict[str, Any]:
    """Return the values of the named arguments the user explicitly provided.

    Parameters
    ----------
    namespace : argparse.Namespace
        Parsed arguments
    names : iterable of str
        Destinations to consider

    Returns
    -------
    dict
        Mapping of destination to value, limited to provided arguments

    """
    provided: set[str] = getattr(namespace, "_provided_args", set())
    return {name: getattr(namespace, name) for name in names if name in provided}
