import pytest

from componentsplit.core.classifier import is_extractable
from componentsplit.core.config import DEFAULT_RESERVED_NAMES, ModularizerConfig

RESERVED = frozenset(DEFAULT_RESERVED_NAMES)


@pytest.mark.parametrize('name', ['Header', 'Sidebar', 'UserCard', 'Ab'])
def test_pascal_case_names_are_extractable(name):
    assert is_extractable(name, RESERVED)


@pytest.mark.parametrize('name', ['header', 'useToggle', 'formatDate', '_Private', '$Store'])
def test_non_pascal_case_names_are_rejected(name):
    assert not is_extractable(name, RESERVED)


def test_single_letter_names_are_rejected():
    assert not is_extractable('A', RESERVED)
    assert not is_extractable('X', frozenset())


def test_empty_name_is_rejected():
    assert not is_extractable('', RESERVED)


@pytest.mark.parametrize('name', DEFAULT_RESERVED_NAMES)
def test_reserved_entry_names_are_rejected(name):
    assert not is_extractable(name, RESERVED), f'{name} is reserved and must stay in the host'


def test_reserved_set_is_caller_supplied():
    config = ModularizerConfig().with_reserved('RootLayout', 'Dashboard')
    assert not is_extractable('Dashboard', config.reserved_names)
    assert not is_extractable('RootLayout', config.reserved_names)
    assert is_extractable('App', frozenset()), 'App is only excluded through the reserved set'
