"""
Configuration for componentsplit.

Configuration objects are immutable and supplied by the caller; every run
reads them but never mutates them, so one instance can be shared between
concurrent runs.
"""
import json
import logging
from pathlib import Path
from typing import FrozenSet, Literal, Tuple, Union

from pydantic import BaseModel, field_validator
from pydantic import ValidationError as PydanticValidationError

from componentsplit.core.error_handling import ConfigurationError, InvalidConfigurationError

logger = logging.getLogger(__name__)

# Root component plus common routing-framework entry points (Next.js pages/layouts).
DEFAULT_RESERVED_NAMES: Tuple[str, ...] = ('App', 'MyApp', 'Home', 'Index', 'Page', 'Layout')

# Host files probed, in order, when no input file is given.
DEFAULT_ENTRY_CANDIDATES: Tuple[str, ...] = (
    'App.jsx',
    'pages/index.js',
    'pages/_app.js',
    'src/App.jsx',
    'app/page.js',
)

# Stateful primitives exported by the runtime library.
DEFAULT_RUNTIME_MARKERS: Tuple[str, ...] = (
    'useState',
    'useEffect',
    'useContext',
    'useReducer',
    'useRef',
    'useMemo',
    'useCallback',
    'useLayoutEffect',
    'useImperativeHandle',
    'useId',
    'useTransition',
    'useDeferredValue',
    'useSyncExternalStore',
    'useInsertionEffect',
    'useDebugValue',
)


class FormatterOptions(BaseModel):
    """Options handed to the output formatter (Prettier vocabulary)."""
    single_quote: bool = True
    tab_width: int = 2
    semi: bool = True
    trailing_comma: Literal['all', 'es5', 'none'] = 'es5'
    use_prettier: bool = False
    prettier_executable: str = 'prettier'
    timeout: float = 30.0
    model_config = {'frozen': True}

    @field_validator('tab_width')
    @classmethod
    def _check_tab_width(cls, value: int) -> int:
        if value < 1:
            raise ValueError('tab_width must be a positive integer')
        return value


class ModularizerConfig(BaseModel):
    """Immutable settings threaded through a modularization run."""
    reserved_names: FrozenSet[str] = frozenset(DEFAULT_RESERVED_NAMES)
    import_path: str = './components'
    file_extension: str = '.jsx'
    runtime_module: str = 'react'
    runtime_default_name: str = 'React'
    runtime_markers: Tuple[str, ...] = DEFAULT_RUNTIME_MARKERS
    entry_candidates: Tuple[str, ...] = DEFAULT_ENTRY_CANDIDATES
    formatting: FormatterOptions = FormatterOptions()
    model_config = {'frozen': True}

    @field_validator('file_extension')
    @classmethod
    def _check_extension(cls, value: str) -> str:
        if not value.startswith('.') or len(value) < 2:
            raise ValueError("file_extension must look like '.jsx'")
        return value

    @field_validator('entry_candidates')
    @classmethod
    def _check_entry_candidates(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if not value:
            raise ValueError('entry_candidates must name at least one file')
        return value

    @field_validator('import_path')
    @classmethod
    def _check_import_path(cls, value: str) -> str:
        value = value.rstrip('/')
        if not value:
            raise ValueError('import_path must not be empty')
        return value

    def with_reserved(self, *names: str) -> 'ModularizerConfig':
        """Return a copy whose reserved set is extended with ``names``."""
        return self.model_copy(update={'reserved_names': self.reserved_names | frozenset(names)})

    def module_import_source(self, name: str) -> str:
        """Import specifier used by the host to reach the module for ``name``."""
        return f"{self.import_path}/{name}"

    @property
    def components_depth(self) -> int:
        """Number of directory levels between the host file and the components directory."""
        return len([part for part in self.import_path.split('/') if part not in ('', '.')])

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> 'ModularizerConfig':
        """
        Load configuration from a JSON file.

        Args:
            path: Path to a JSON object with ``ModularizerConfig`` fields

        Returns:
            ModularizerConfig instance

        Raises:
            ConfigurationError: If the file cannot be read or holds invalid values
        """
        try:
            with open(path, 'r', encoding='utf8') as fh:
                raw = json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read configuration file: {e}", path=str(path)) from e
        if not isinstance(raw, dict):
            raise InvalidConfigurationError('<root>', type(raw).__name__, 'expected a JSON object', path=str(path))
        try:
            config = cls.model_validate(raw)
        except PydanticValidationError as e:
            first = e.errors()[0]
            setting = '.'.join(str(part) for part in first.get('loc', ())) or '<root>'
            raise InvalidConfigurationError(setting, first.get('input'), first.get('msg', 'invalid value'),
                                            path=str(path)) from e
        logger.debug(f"Loaded configuration from {path}")
        return config


DEFAULT_CONFIG = ModularizerConfig()
