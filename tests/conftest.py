import pytest

from componentsplit import Modularizer


SAMPLE_APP = """import React, { useState } from 'react';

// Header component
function Header() {
  return (
    <header className="header">
      <h1>My App</h1>
    </header>
  );
}

// Sidebar component
const Sidebar = () => {
  const [isOpen, setIsOpen] = useState(false);
  return (
    <aside className="sidebar">
      <button onClick={() => setIsOpen(!isOpen)}>Toggle</button>
    </aside>
  );
};

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


@pytest.fixture
def sample_app():
    return SAMPLE_APP


@pytest.fixture
def modularizer():
    return Modularizer()
