"""Reading and writing ID range policy files."""

from idslicer.policy.helper import find_policy_file, get_range, load_policy
from idslicer.policy.reader import PolicyReader
from idslicer.policy.writer import PolicyWriter, policy_iri

__all__ = [
    "PolicyReader",
    "PolicyWriter",
    "find_policy_file",
    "get_range",
    "load_policy",
    "policy_iri",
]
