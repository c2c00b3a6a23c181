"""
Input validation helpers for componentsplit.

Validation happens at the boundary (API handlers, CLI, ``Modularizer.process``)
so that malformed payloads are rejected before any parsing is attempted.
"""
from typing import Any, Tuple, Type, Union

from componentsplit.core.error_handling import EmptyInputError, InvalidTypeError


def validate_type(value: Any, expected_type: Union[Type, Tuple[Type, ...]],
                  param_name: str) -> None:
    """
    Validate that a value is of the expected type.

    Args:
        value: The value to check
        expected_type: The expected type(s)
        param_name: The parameter name for error messages

    Raises:
        InvalidTypeError: If the value is not of the expected type
    """
    if value is None:
        return

    if not isinstance(value, expected_type):
        raise InvalidTypeError(param_name, value, expected_type)


def validate_source_code(code: Any, param_name: str = 'code') -> str:
    """
    Validate a source code payload.

    Args:
        code: The candidate payload
        param_name: The parameter name for error messages

    Returns:
        The code, unchanged

    Raises:
        EmptyInputError: If the payload is missing, not a string or blank
    """
    if code is None:
        raise EmptyInputError(param_name, 'missing')
    if not isinstance(code, str):
        raise EmptyInputError(param_name, f'of type {type(code).__name__}, not a string')
    if not code.strip():
        raise EmptyInputError(param_name, 'empty')
    return code
