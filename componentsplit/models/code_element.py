"""
Models for code elements.
Provides data structures for host imports, extraction candidates and generated modules.
"""
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from .enums import DeclarationForm
from .range import SourceSpan

logger = logging.getLogger(__name__)


class ImportSpecifier(BaseModel):
    """One ``name`` or ``name as alias`` entry of a named import"""
    imported: str
    local: str
    model_config = {'frozen': True}

    def render(self) -> str:
        if self.imported == self.local:
            return self.imported
        return f"{self.imported} as {self.local}"


class ImportBinding(BaseModel):
    """A top-level import statement of the host unit"""
    source: str
    text: str
    default_name: Optional[str] = None
    namespace_name: Optional[str] = None
    named: Tuple[ImportSpecifier, ...] = ()
    type_only: bool = False
    model_config = {'frozen': True}

    @property
    def local_names(self) -> List[str]:
        names = []
        if self.default_name:
            names.append(self.default_name)
        if self.namespace_name:
            names.append(self.namespace_name)
        names.extend(spec.local for spec in self.named)
        return names

    @property
    def is_side_effect(self) -> bool:
        return not self.local_names

    def render(self, keep: Sequence[str], source: Optional[str] = None) -> Optional[str]:
        """
        Render this import restricted to the local names in ``keep``.

        Args:
            keep: Local names that must stay bound
            source: Replacement module specifier (defaults to the original)

        Returns:
            Import statement text, or None when no name is kept
        """
        keep_set = set(keep)
        clauses = []
        if self.default_name and self.default_name in keep_set:
            clauses.append(self.default_name)
        if self.namespace_name and self.namespace_name in keep_set:
            clauses.append(f"* as {self.namespace_name}")
        named = [spec.render() for spec in self.named if spec.local in keep_set]
        if named:
            clauses.append('{ ' + ', '.join(named) + ' }')
        if not clauses:
            return None
        keyword = 'import type' if self.type_only else 'import'
        return f"{keyword} {', '.join(clauses)} from '{source or self.source}';"


class ExtractionCandidate(BaseModel):
    """A top-level component discovered in the host unit.

    Created by the scanner as a snapshot taken before any tree mutation.
    Instances are immutable; the dependency resolver returns an enriched copy.
    """
    name: str
    declaration_form: DeclarationForm
    body_text: str
    uses_external_runtime: bool = False
    leading_comments: str = ''
    span: SourceSpan
    bound_names: Tuple[str, ...] = ()
    runtime_specifiers: Tuple[str, ...] = ()
    sibling_references: Tuple[str, ...] = ()
    host_imports: Tuple[str, ...] = ()
    unresolved_references: Tuple[str, ...] = ()
    model_config = {'frozen': True}

    @property
    def is_named_declaration(self) -> bool:
        return self.declaration_form == DeclarationForm.NAMED_DECLARATION


class GeneratedModule(BaseModel):
    """One output file produced for an extraction candidate"""
    name: str
    filename: str
    code: str
    formatted: bool = True
    warnings: List[str] = Field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        return {'name': self.name, 'filename': self.filename, 'code': self.code}


class ModularizationResult(BaseModel):
    """Outcome of one modularization run"""
    updated_app: str
    components: List[GeneratedModule] = Field(default_factory=list)
    processing_time: Optional[float] = None
    warnings: List[str] = Field(default_factory=list)
    diagnostics: List[str] = Field(default_factory=list)

    @property
    def extracted_count(self) -> int:
        return len(self.components)

    def to_payload(self) -> Dict[str, Any]:
        """Serialise to the external ``{updatedApp, components, processingTime}`` shape."""
        payload: Dict[str, Any] = {
            'updatedApp': self.updated_app,
            'components': [module.to_payload() for module in self.components],
            'extractedCount': self.extracted_count,
            'warnings': list(self.warnings),
        }
        if self.processing_time is not None:
            payload['processingTime'] = self.processing_time
        return payload
