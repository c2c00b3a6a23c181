import threading

import pytest

from componentsplit import Modularizer, ModularizerConfig
from componentsplit.core.error_handling import EmptyInputError, EntryNotFoundError, FormatError, ParseError
from componentsplit.core.formatting.formatter import BaseFormatter


EXPECTED_HOST = """import React, { useState } from 'react';

import Header from './components/Header';
import Sidebar from './components/Sidebar';

function App() {
  return (
    <div className="app">
      <Header />
      <Sidebar />
    </div>
  );
}

export default App;
"""

EXPECTED_HEADER = """import React from 'react';

// Header component
export default function Header() {
  return (
    <header className="header">
      <h1>My App</h1>
    </header>
  );
}
"""


def import_lines(text):
    return [line for line in text.splitlines() if line.startswith('import ')]


def test_extracts_header_and_sidebar(modularizer, sample_app):
    result = modularizer.process(sample_app)
    assert [m.filename for m in result.components] == ['Header.jsx', 'Sidebar.jsx']
    assert result.updated_app == EXPECTED_HOST
    assert result.components[0].code == EXPECTED_HEADER
    assert result.extracted_count == 2
    assert result.processing_time is not None


def test_sidebar_module_imports_its_hook(modularizer, sample_app):
    sidebar = modularizer.process(sample_app).components[1]
    lines = sidebar.code.splitlines()
    assert lines[0] == "import React, { useState } from 'react';"
    assert '// Sidebar component' in lines
    assert lines[-1] == 'export default Sidebar;'


def test_output_is_a_fixed_point(modularizer, sample_app):
    first = modularizer.process(sample_app)
    second = modularizer.process(first.updated_app)
    assert second.components == []
    assert second.updated_app == first.updated_app


def test_one_import_line_per_module(modularizer, sample_app):
    result = modularizer.process(sample_app)
    component_imports = [l for l in import_lines(result.updated_app) if './components/' in l]
    assert len(component_imports) == len(result.components)
    for module in result.components:
        assert f"import {module.name} from './components/{module.name}';" in component_imports


@pytest.mark.parametrize('reserved', ['Header', 'Sidebar'])
def test_reserved_names_are_never_extracted(sample_app, reserved):
    config = ModularizerConfig().with_reserved(reserved)
    result = Modularizer(config).process(sample_app)
    names = [m.name for m in result.components]
    assert reserved not in names
    assert 'App' not in names
    assert len(names) == 1


def test_surviving_statements_keep_their_order(modularizer):
    code = """import React from 'react';

const first = 1;

function Badge() {
  return <span>{first}</span>;
}

const second = 2;

function App() {
  return <Badge />;
}

export default App;
"""
    host = modularizer.process(code).updated_app
    positions = [host.index(s) for s in ('const first', 'const second', 'function App', 'export default App')]
    assert positions == sorted(positions)
    assert 'function Badge' not in host


def test_root_only_input_is_returned_unchanged(modularizer):
    code = "import React from 'react';\n\nfunction App() {\n  return <div>Hello</div>;\n}\n\nexport default App;\n"
    result = modularizer.process(code)
    assert result.components == []
    assert result.updated_app == code


def test_multi_binding_statement_is_removed_whole(modularizer):
    code = "const Card = () => <div>card</div>, helper = 42;\n\nfunction App() {\n  return <Card />;\n}\n"
    result = modularizer.process(code)
    assert [m.name for m in result.components] == ['Card']
    assert 'helper' not in result.updated_app
    assert result.updated_app.startswith("import Card from './components/Card';\n\n")
    assert 'helper = 42' in result.components[0].code
    assert any('helper' in w for w in result.warnings)


def test_unterminated_tag_is_rejected(modularizer):
    code = "function Header() {\n  return <header><h1>Title</h1>;\n}\n"
    with pytest.raises(ParseError) as exc:
        modularizer.process(code)
    assert exc.value.line is not None


@pytest.mark.parametrize('code', [None, '', '   \n', 42])
def test_empty_or_non_string_input_is_rejected(modularizer, code):
    with pytest.raises(EmptyInputError):
        modularizer.process(code)


def test_sibling_components_import_each_other(modularizer):
    code = """function Icon() {
  return <svg />;
}

function Button() {
  return <button><Icon /></button>;
}

function App() {
  return <Button />;
}
"""
    result = modularizer.process(code)
    button = next(m for m in result.components if m.name == 'Button')
    assert "import Icon from './Icon';" in button.code
    icon = next(m for m in result.components if m.name == 'Icon')
    assert './Button' not in icon.code


def test_host_scope_reference_is_reported(modularizer):
    code = """const API_URL = '/api';

function Fetcher() {
  return <a href={API_URL}>data</a>;
}

function App() {
  return <Fetcher />;
}
"""
    result = modularizer.process(code)
    assert any('API_URL' in w for w in result.warnings)
    assert "const API_URL = '/api';" in result.updated_app


def test_relative_host_imports_are_rerooted(modularizer):
    code = """import React from 'react';
import { format } from './utils/format';
import styles from 'app.module.css';

const Price = ({ value }) => <span className={styles.price}>{format(value)}</span>;

function App() {
  return <Price value={1} />;
}
"""
    price = modularizer.process(code).components[0]
    assert "import { format } from '../utils/format';" in price.code
    assert "import styles from 'app.module.css';" in price.code


def test_scan_lists_candidates_without_rewriting(modularizer, sample_app):
    candidates = modularizer.scan(sample_app)
    assert [c.name for c in candidates] == ['Header', 'Sidebar']
    assert candidates[1].runtime_specifiers == ('useState',)


def test_concurrent_runs_do_not_share_state(sample_app):
    modularizer = Modularizer()
    other = "function Footer() {\n  return <footer />;\n}\n\nfunction App() {\n  return <Footer />;\n}\n"
    results = {}

    def worker(key, code):
        results[key] = modularizer.process(code)

    threads = [threading.Thread(target=worker, args=(i, sample_app if i % 2 else other)) for i in range(6)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    for key, result in results.items():
        expected = ['Header', 'Sidebar'] if key % 2 else ['Footer']
        assert [m.name for m in result.components] == expected


def test_payload_shape(modularizer, sample_app):
    payload = modularizer.process(sample_app).to_payload()
    assert set(payload) == {'updatedApp', 'components', 'extractedCount', 'warnings', 'processingTime'}
    assert payload['components'][0] == {
        'name': 'Header',
        'filename': 'Header.jsx',
        'code': EXPECTED_HEADER,
    }


def test_host_template_literal_survives_unchanged(modularizer):
    code = "const BANNER = `top\n\n\nbottom   `;\n\nfunction Card() {\n  return <pre>{BANNER}</pre>;\n}\n\nfunction App() {\n  return <Card />;\n}\n"
    result = modularizer.process(code)
    assert "const BANNER = `top\n\n\nbottom   `;" in result.updated_app


def test_extracted_template_literal_survives_unchanged(modularizer):
    code = "function Note() {\n  const t = `a\n\n\nb`;\n  return <p>{t}</p>;\n}\n\nfunction App() {\n  return <Note />;\n}\n"
    note = modularizer.process(code).components[0]
    assert "const t = `a\n\n\nb`;" in note.code


def test_formatting_fallback_is_a_diagnostic_not_a_warning(sample_app):
    class RejectingFormatter(BaseFormatter):
        def format_code(self, code, filename='module.jsx'):
            raise FormatError('rejected', formatter='rejecting')

    result = Modularizer(formatter=RejectingFormatter()).process(sample_app)
    assert result.warnings == []
    assert len(result.diagnostics) == 3
    assert all('could not be formatted' in note for note in result.diagnostics)
    assert not any(m.formatted for m in result.components)


def test_find_entry_file_follows_candidate_order(tmp_path):
    (tmp_path / 'src').mkdir()
    (tmp_path / 'src' / 'App.jsx').write_text('function App() {}\n')
    (tmp_path / 'pages').mkdir()
    (tmp_path / 'pages' / 'index.js').write_text('function Home() {}\n')
    assert Modularizer().find_entry_file(tmp_path) == tmp_path / 'pages' / 'index.js'
    config = ModularizerConfig(entry_candidates=('src/App.jsx',))
    assert Modularizer(config).find_entry_file(tmp_path) == tmp_path / 'src' / 'App.jsx'


def test_find_entry_file_without_candidates_raises(tmp_path):
    with pytest.raises(EntryNotFoundError) as exc:
        Modularizer().find_entry_file(tmp_path)
    assert 'App.jsx' in exc.value.message
