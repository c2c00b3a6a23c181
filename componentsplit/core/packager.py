"""
Export packager: renders one extraction candidate as a standalone module.
"""
import logging
from typing import List, Optional

from componentsplit.core.config import DEFAULT_CONFIG, ModularizerConfig
from componentsplit.core.formatting.formatter import BaseFormatter, get_formatter, format_with_fallback
from componentsplit.models.code_element import ExtractionCandidate, GeneratedModule

logger = logging.getLogger(__name__)


class ExportPackager:
    """Turns candidates into default-exported modules."""

    def __init__(self, config: Optional[ModularizerConfig] = None, formatter: Optional[BaseFormatter] = None):
        self.config = config or DEFAULT_CONFIG
        self.formatter = formatter or get_formatter(self.config.formatting)

    def runtime_import_line(self, candidate: ExtractionCandidate) -> str:
        default_name = self.config.runtime_default_name
        module = self.config.runtime_module
        if candidate.runtime_specifiers:
            return f"import {default_name}, {{ {', '.join(candidate.runtime_specifiers)} }} from '{module}';"
        return f"import {default_name} from '{module}';"

    def import_lines(self, candidate: ExtractionCandidate) -> List[str]:
        lines = []
        if candidate.uses_external_runtime:
            lines.append(self.runtime_import_line(candidate))
        lines.extend(candidate.host_imports)
        lines.extend(f"import {name} from './{name}';" for name in candidate.sibling_references)
        return lines

    def assemble(self, candidate: ExtractionCandidate) -> str:
        """
        Build the unformatted module text.

        ``function Name(...)`` becomes ``export default function Name(...)``;
        a bound expression keeps its statement and gains ``export default Name;``.
        """
        if candidate.is_named_declaration:
            declaration = 'export default ' + candidate.body_text
        else:
            statement = candidate.body_text.rstrip()
            if not statement.endswith(';'):
                statement += ';'
            declaration = f"{statement}\n\nexport default {candidate.name};"
        if candidate.leading_comments:
            declaration = candidate.leading_comments + '\n' + declaration

        parts = []
        imports = self.import_lines(candidate)
        if imports:
            parts.append('\n'.join(imports))
        parts.append(declaration)
        return '\n\n'.join(parts) + '\n'

    def package(self, candidate: ExtractionCandidate) -> GeneratedModule:
        filename = f"{candidate.name}{self.config.file_extension}"
        result = format_with_fallback(self.formatter, self.assemble(candidate), filename)
        warnings = []
        if candidate.unresolved_references:
            warnings.append(
                f"{filename} references names defined only in the host: "
                f"{', '.join(candidate.unresolved_references)}"
            )
        logger.debug(f"Packaged {filename} (formatted={result.formatted})")
        return GeneratedModule(
            name=candidate.name,
            filename=filename,
            code=result.text,
            formatted=result.formatted,
            warnings=warnings,
        )
