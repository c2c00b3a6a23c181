"""
Declaration classifier: decides whether a declared name is an extractable component.
"""
from typing import AbstractSet


def is_extractable(name: str, reserved_names: AbstractSet[str]) -> bool:
    """
    Return True when ``name`` looks like a sub-component that can be moved out.

    A name qualifies when it is PascalCase (first character is an uppercase
    letter), longer than one character and not one of the reserved entry
    names (root component, framework page/layout names).
    """
    if not name or not name[0].isupper():
        return False
    if len(name) <= 1:
        return False
    return name not in reserved_names
