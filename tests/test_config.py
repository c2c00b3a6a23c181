import json

import pytest

from componentsplit.core.config import DEFAULT_RESERVED_NAMES, FormatterOptions, ModularizerConfig
from componentsplit.core.error_handling import ConfigurationError, InvalidConfigurationError


def test_defaults():
    config = ModularizerConfig()
    assert set(DEFAULT_RESERVED_NAMES) <= config.reserved_names
    assert config.import_path == './components'
    assert config.file_extension == '.jsx'
    assert config.components_depth == 1
    assert config.module_import_source('Card') == './components/Card'


def test_config_is_immutable():
    config = ModularizerConfig()
    with pytest.raises(Exception):
        config.import_path = './elsewhere'


def test_with_reserved_returns_a_copy():
    config = ModularizerConfig()
    extended = config.with_reserved('Shell')
    assert 'Shell' in extended.reserved_names
    assert 'Shell' not in config.reserved_names


def test_import_path_trailing_slash_is_dropped():
    config = ModularizerConfig(import_path='../shared/components/')
    assert config.import_path == '../shared/components'
    assert config.module_import_source('Card') == '../shared/components/Card'


@pytest.mark.parametrize('field, value', [
    ('file_extension', 'jsx'),
    ('file_extension', '.'),
    ('import_path', '/'),
])
def test_invalid_values_are_rejected(field, value):
    with pytest.raises(ValueError):
        ModularizerConfig(**{field: value})


def test_formatter_options_validation():
    with pytest.raises(ValueError):
        FormatterOptions(tab_width=0)
    with pytest.raises(ValueError):
        FormatterOptions(trailing_comma='sometimes')


def test_from_file(tmp_path):
    path = tmp_path / 'config.json'
    path.write_text(json.dumps({
        'reserved_names': ['App', 'Root'],
        'file_extension': '.tsx',
        'formatting': {'tab_width': 4, 'single_quote': False},
    }))
    config = ModularizerConfig.from_file(path)
    assert config.reserved_names == frozenset({'App', 'Root'})
    assert config.file_extension == '.tsx'
    assert config.formatting.tab_width == 4
    assert not config.formatting.single_quote


def test_from_file_missing(tmp_path):
    with pytest.raises(ConfigurationError):
        ModularizerConfig.from_file(tmp_path / 'absent.json')


def test_from_file_invalid_json(tmp_path):
    path = tmp_path / 'config.json'
    path.write_text('{not json')
    with pytest.raises(ConfigurationError):
        ModularizerConfig.from_file(path)


def test_from_file_invalid_value(tmp_path):
    path = tmp_path / 'config.json'
    path.write_text(json.dumps({'file_extension': 'jsx'}))
    with pytest.raises(InvalidConfigurationError) as exc:
        ModularizerConfig.from_file(path)
    assert exc.value.setting == 'file_extension'


def test_from_file_requires_object(tmp_path):
    path = tmp_path / 'config.json'
    path.write_text('[1, 2]')
    with pytest.raises(InvalidConfigurationError):
        ModularizerConfig.from_file(path)


def test_entry_candidates_must_not_be_empty():
    assert ModularizerConfig().entry_candidates[0] == 'App.jsx'
    with pytest.raises(ValueError):
        ModularizerConfig(entry_candidates=())
