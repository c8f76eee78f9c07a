"""Convenience functions to locate a policy file and pick a range from it."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from idslicer.core.errors import InvalidArgumentError
from idslicer.core.models import Range
from idslicer.core.registry import Registry
from idslicer.policy.constants import POLICY_SUFFIX
from idslicer.policy.reader import PolicyReader

logger = logging.getLogger(__name__)


def find_policy_file(directory: Path | None = None) -> Path | None:
    """Return the only ``*-idranges.owl`` file in *directory*, if there is one.

    Returns None when there is no such file, or more than one.
    """
    directory = directory or Path.cwd()
    matches = sorted(directory.glob(f"*{POLICY_SUFFIX}"))
    if len(matches) != 1:
        logger.debug("Found %d policy files in %s", len(matches), directory)
        return None
    return matches[0]


def load_policy(filename: Path | str | None = None) -> Registry:
    """Read the policy in *filename*, or the one found in the working directory.

    Raises:
        FileNotFoundError: If no file is given and none can be found.
        InvalidPolicyError: If the file is not a valid policy.
    """
    if filename is None:
        found = find_policy_file()
        if found is None:
            raise FileNotFoundError(f"No single *{POLICY_SUFFIX} file in the current directory")
        filename = found
    return PolicyReader().read(filename)


def get_range(
    user: str | None,
    defaults: Sequence[str] | None,
    filename: Path | str | None = None,
) -> tuple[Registry, Range]:
    """Load a policy and return it together with the range of *user*.

    If *user* is None, the first range allocated to any of *defaults* is
    returned instead.

    Raises:
        RangeNotFoundError: If no matching range exists.
    """
    if user is None and not defaults:
        raise InvalidArgumentError("Both user and defaults cannot be empty")

    registry = load_policy(filename)
    if user is not None:
        return registry, registry.get_range(user)
    return registry, registry.get_any_range(defaults or [])
