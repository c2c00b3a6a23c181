"""
Error handling utilities for componentsplit.

This module provides the exception hierarchy used throughout the package.
Every exception carries a context dictionary that is rendered together with
the message, so callers (CLI, HTTP API) can surface a single descriptive
error without re-assembling details from the call site.
"""
import functools
import logging
from typing import Any, Callable, Optional, Sequence, Tuple, Type, Union

logger = logging.getLogger('componentsplit')


class ModularizerError(Exception):
    """Base class for all componentsplit exceptions.

    All exceptions specific to componentsplit inherit from this class to allow
    for consistent error handling and identification.
    """
    def __init__(self, message: str, **kwargs):
        self.message = message
        self.context = dict(kwargs.get('context', {}))

        for key, value in kwargs.items():
            if key != 'context' and value is not None:
                self.context[key] = value

        super().__init__(message)

    def add_context(self, key: str, value: Any) -> None:
        """Add additional context information to the exception.

        Args:
            key: The context key
            value: The context value
        """
        self.context[key] = value

    def __str__(self) -> str:
        if not self.context:
            return self.message

        context_str = ', '.join(f"{k}={v}" for k, v in self.context.items())
        return f"{self.message} [Context: {context_str}]"

# ===== Validation Errors =====

class ValidationError(ModularizerError):
    """Exception raised for input validation failures."""
    def __init__(self, message: str, parameter: Optional[str] = None,
                 expected: Optional[str] = None, **kwargs):
        super().__init__(message, parameter=parameter, expected=expected, **kwargs)
        self.parameter = parameter
        self.expected = expected

class EmptyInputError(ValidationError):
    """Exception raised when the source code payload is missing, blank or not a string.

    Raised at the boundary, before any parsing is attempted.
    """
    def __init__(self, parameter: str = 'code', reason: str = 'missing', **kwargs):
        message = f"No code provided: parameter '{parameter}' is {reason}"
        super().__init__(message, parameter=parameter, expected='non-empty string', **kwargs)
        self.reason = reason

class InvalidTypeError(ValidationError):
    """Exception raised when a parameter has an incorrect type."""
    def __init__(self, parameter: str, value: Any, expected_type: Union[Type, Tuple[Type, ...], str], **kwargs):
        if isinstance(expected_type, str):
            expected_type_str = expected_type
        elif isinstance(expected_type, tuple):
            expected_type_str = ', '.join(t.__name__ for t in expected_type)
        else:
            expected_type_str = expected_type.__name__
        message = f"Invalid type for parameter '{parameter}': {type(value).__name__}. Expected: {expected_type_str}"
        super().__init__(message, parameter=parameter, expected=expected_type_str, **kwargs)

# ===== Configuration Errors =====

class ConfigurationError(ModularizerError):
    """Exception raised for invalid configuration values or unreadable config files."""
    pass

class InvalidConfigurationError(ConfigurationError):
    """Exception raised when a configuration setting has an invalid value."""
    def __init__(self, setting: str, value: Any, reason: str, **kwargs):
        message = f"Invalid configuration setting '{setting}': {value}. Reason: {reason}"
        super().__init__(message, setting=setting, reason=reason, **kwargs)
        self.setting = setting
        self.reason = reason

# ===== Parsing Errors =====

class ParseError(ModularizerError):
    """Exception raised when the host source is not syntactically valid.

    Fatal to the whole run: no module is generated and nothing is written.
    """
    def __init__(self, message: str, line: Optional[int] = None,
                 column: Optional[int] = None, code_snippet: Optional[str] = None, **kwargs):
        super().__init__(message, line=line, column=column, code_snippet=code_snippet, **kwargs)
        self.line = line
        self.column = column
        self.code_snippet = code_snippet

class UnsupportedLanguageError(ModularizerError):
    """Exception raised when no grammar is available for a language code."""
    def __init__(self, language: str, **kwargs):
        super().__init__(f"Unsupported language: '{language}'", language=language, **kwargs)
        self.language = language

# ===== Formatting Errors =====

class FormatError(ModularizerError):
    """Exception raised when the output formatter rejects a piece of code.

    Never fatal: callers recover by keeping the unformatted text.
    """
    def __init__(self, message: str, formatter: Optional[str] = None, **kwargs):
        super().__init__(message, formatter=formatter, **kwargs)
        self.formatter = formatter

# ===== Output Errors =====

class OutputWriteError(ModularizerError):
    """Exception raised when a generated file or directory cannot be written."""
    def __init__(self, path: str, reason: str, **kwargs):
        message = f"Failed to write '{path}': {reason}"
        super().__init__(message, path=path, **kwargs)
        self.path = path
        self.reason = reason

# ===== Input Discovery Errors =====

class EntryNotFoundError(ModularizerError):
    """Exception raised when no host file was given and none of the entry candidates exists."""
    def __init__(self, base_dir: str, candidates: Sequence[str], **kwargs):
        message = f"No input file found in '{base_dir}' (looked for: {', '.join(candidates)})"
        super().__init__(message, base_dir=base_dir, **kwargs)
        self.base_dir = base_dir
        self.candidates = tuple(candidates)

# ===== Utility Decorators =====

def wrap_os_errors(func: Callable) -> Callable:
    """
    Decorator turning ``OSError`` raised by filesystem helpers into
    ``OutputWriteError``. The wrapped function must take the target path as
    its first positional argument after ``self``.
    """
    @functools.wraps(func)
    def wrapper(self, path, *args, **kwargs):
        try:
            return func(self, path, *args, **kwargs)
        except OSError as e:
            logger.error(f"I/O error during {func.__name__} for {path}: {e}")
            raise OutputWriteError(str(path), e.strerror or str(e)) from e

    return wrapper
