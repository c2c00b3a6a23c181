"""
Unit rewriter: removes extracted statements from the host and injects imports.
"""
import logging
from typing import List, Optional, Sequence, Tuple

from componentsplit.core.config import DEFAULT_CONFIG, ModularizerConfig
from componentsplit.core.host import HostUnit
from componentsplit.models.range import SourceSpan

logger = logging.getLogger(__name__)

Edit = Tuple[int, int, bytes]


def build_import_lines(names: Sequence[str], config: Optional[ModularizerConfig] = None) -> List[str]:
    """One ``import Name from '<import_path>/Name';`` line per name, in the given order."""
    config = config or DEFAULT_CONFIG
    return [f"import {name} from '{config.module_import_source(name)}';" for name in names]


def apply_edits(code: bytes, edits: Sequence[Edit]) -> bytes:
    """
    Apply (start, end, replacement) edits back-to-front so earlier offsets stay valid.

    At equal offsets the removal is applied before the insertion, which keeps
    inserted text in front of whatever follows the removed range.
    """
    ordered = sorted(edits, key=lambda e: (e[0], e[1] != e[0]), reverse=True)
    result = code
    for start, end, replacement in ordered:
        result = result[:start] + replacement + result[end:]
    return result


class UnitRewriter:
    """Produces the updated host text from the original bytes and the removal spans."""

    def __init__(self, config: Optional[ModularizerConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def rewrite(self, host: HostUnit, removals: Sequence[SourceSpan], import_lines: Sequence[str]) -> str:
        """
        Remove every span in ``removals`` and insert ``import_lines`` after the
        last existing import. Surviving statements keep their relative order.

        Returns:
            Updated host text, before formatting
        """
        edits: List[Edit] = []
        seen = set()
        for span in removals:
            key = (span.start_byte, span.end_byte)
            if key in seen:
                continue
            seen.add(key)
            edits.append((span.start_byte, span.end_byte, b''))
            logger.debug(f"Removing lines {span.start_line}-{span.end_line} ({span.length} bytes)")

        if import_lines:
            offset = self._insertion_offset(host, removals)
            block = '\n'.join(import_lines)
            if offset == 0:
                text = block + '\n\n'
            else:
                text = '\n' + block + '\n'
                if not host.code_bytes[:offset].endswith(b'\n'):
                    text = '\n' + text
            edits.append((offset, offset, text.encode('utf8')))
            logger.info(f"Adding {len(import_lines)} import(s) to the host")

        return apply_edits(host.code_bytes, edits).decode('utf8')

    def _insertion_offset(self, host: HostUnit, removals: Sequence[SourceSpan]) -> int:
        offset = host.import_insertion_offset()
        for span in removals:
            # A removed statement sharing the line of the last import
            if span.start_byte < offset < span.end_byte:
                offset = span.start_byte
        return offset
