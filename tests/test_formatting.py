import subprocess

import pytest

from componentsplit.core.config import FormatterOptions
from componentsplit.core.error_handling import FormatError
from componentsplit.core.formatting import BasicFormatter, PrettierFormatter
from componentsplit.core.formatting.formatter import (
    FallbackRaw,
    Formatted,
    format_with_fallback,
    get_formatter,
)


@pytest.fixture
def formatter():
    return BasicFormatter()


def test_basic_formatter_normalises_blank_lines(formatter):
    code = "\n\nimport React from 'react';\n\n\n\nconst A = () => <a />;   \n"
    assert formatter.format_code(code) == "import React from 'react';\n\nconst A = () => <a />;\n"


def test_basic_formatter_converts_crlf(formatter):
    assert formatter.format_code('const a = 1;\r\nconst b = 2;\r\n') == 'const a = 1;\nconst b = 2;\n'


def test_basic_formatter_is_idempotent(formatter, sample_app):
    once = formatter.format_code(sample_app)
    assert formatter.format_code(once) == once


def test_basic_formatter_rejects_invalid_code(formatter):
    with pytest.raises(FormatError) as exc:
        formatter.format_code('const A = () => <div>;', 'A.jsx')
    assert 'A.jsx' in exc.value.message
    assert exc.value.formatter == 'basic'


def test_fallback_returns_raw_text_on_failure(formatter):
    code = 'function Broken( {'
    result = format_with_fallback(formatter, code, 'Broken.jsx')
    assert isinstance(result, FallbackRaw)
    assert not result.formatted
    assert result.text == code
    assert result.reason


def test_fallback_returns_formatted_on_success(formatter):
    result = format_with_fallback(formatter, 'const a = 1;', 'a.js')
    assert isinstance(result, Formatted)
    assert result.formatted
    assert result.text == 'const a = 1;\n'


def test_get_formatter_selects_by_options():
    assert isinstance(get_formatter(), BasicFormatter)
    assert isinstance(get_formatter(FormatterOptions(use_prettier=True)), PrettierFormatter)


def test_prettier_command_reflects_options():
    options = FormatterOptions(single_quote=False, semi=False, tab_width=4, trailing_comma='all')
    command = PrettierFormatter(options).build_command('prettier', 'Card.jsx')
    assert command[:3] == ['prettier', '--stdin-filepath', 'Card.jsx']
    assert '--single-quote' not in command
    assert '--no-semi' in command
    assert command[command.index('--tab-width') + 1] == '4'
    assert command[command.index('--trailing-comma') + 1] == 'all'


def test_prettier_default_command_uses_single_quotes():
    command = PrettierFormatter().build_command('prettier', 'Card.jsx')
    assert '--single-quote' in command
    assert '--no-semi' not in command


def test_prettier_missing_executable_raises():
    options = FormatterOptions(use_prettier=True, prettier_executable='definitely-not-prettier-xyz')
    with pytest.raises(FormatError, match='not found'):
        PrettierFormatter(options).format_code('const a = 1;')


def test_prettier_failure_falls_back(monkeypatch):
    monkeypatch.setattr('shutil.which', lambda name: '/usr/bin/prettier')

    def fake_run(command, **kwargs):
        return subprocess.CompletedProcess(command, 2, stdout='', stderr='SyntaxError: Unexpected token (1:5)')

    monkeypatch.setattr(subprocess, 'run', fake_run)
    result = format_with_fallback(PrettierFormatter(), 'const = ;', 'x.jsx')
    assert isinstance(result, FallbackRaw)
    assert 'SyntaxError' in result.reason


def test_prettier_output_is_returned(monkeypatch):
    monkeypatch.setattr('shutil.which', lambda name: '/usr/bin/prettier')
    calls = []

    def fake_run(command, **kwargs):
        calls.append((command, kwargs))
        return subprocess.CompletedProcess(command, 0, stdout='const a = 1;\n', stderr='')

    monkeypatch.setattr(subprocess, 'run', fake_run)
    assert PrettierFormatter().format_code('const   a=1', 'a.jsx') == 'const a = 1;\n'
    assert calls[0][1]['input'] == 'const   a=1'


def test_prettier_timeout_raises(monkeypatch):
    monkeypatch.setattr('shutil.which', lambda name: '/usr/bin/prettier')

    def fake_run(command, **kwargs):
        raise subprocess.TimeoutExpired(command, kwargs['timeout'])

    monkeypatch.setattr(subprocess, 'run', fake_run)
    with pytest.raises(FormatError, match='timed out'):
        PrettierFormatter(FormatterOptions(timeout=0.1)).format_code('const a = 1;')


def test_multiline_template_literal_is_kept_verbatim(formatter):
    code = "const BANNER = `top\n\n\nbottom   `;\n\n\n\nconst x = 1;   \n"
    assert formatter.format_code(code) == "const BANNER = `top\n\n\nbottom   `;\n\nconst x = 1;\n"


def test_whitespace_around_literals_is_still_normalised(formatter):
    code = "const t = `a\n\n\nb`;   \n\n\n\nfunction f() {\n  return `x`;   \n}\n"
    assert formatter.format_code(code) == "const t = `a\n\n\nb`;\n\nfunction f() {\n  return `x`;\n}\n"


def test_basic_formatter_ignores_prettier_only_options(sample_app):
    plain = BasicFormatter().format_code(sample_app)
    options = FormatterOptions(single_quote=False, semi=False, tab_width=8, trailing_comma='none')
    assert BasicFormatter(options).format_code(sample_app) == plain
