from .models.enums import DeclarationForm
from .models.code_element import ExtractionCandidate, GeneratedModule, ModularizationResult
from .core.config import ModularizerConfig, FormatterOptions
from .core.error_handling import (
    ModularizerError, EmptyInputError, ParseError, FormatError, OutputWriteError, EntryNotFoundError
)
from .core.orchestrator import Modularizer

__version__ = "1.0.0"
__all__ = [
    "Modularizer",
    "ModularizerConfig",
    "FormatterOptions",
    "DeclarationForm",
    "ExtractionCandidate",
    "GeneratedModule",
    "ModularizationResult",
    "ModularizerError",
    "EmptyInputError",
    "ParseError",
    "FormatError",
    "OutputWriteError",
    "EntryNotFoundError",
]
