from .formatter import (
    BaseFormatter, BasicFormatter, FormatResult, Formatted, FallbackRaw,
    format_with_fallback, get_formatter
)
from .prettier_formatter import PrettierFormatter
