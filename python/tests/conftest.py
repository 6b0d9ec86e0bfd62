"""
Test Configuration - Shared fixtures for search tests.

Uses pytest fixtures to create isolated document trees.
"""

import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from docsearch.config import SearchConfig, set_config


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    tmp = tempfile.mkdtemp(prefix="docsearch_test_")
    # Resolve to handle macOS /var -> /private/var symlink
    resolved = Path(tmp).resolve()
    yield resolved
    shutil.rmtree(str(resolved), ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> Generator[SearchConfig, None, None]:
    """Create an isolated test configuration rooted at temp_dir."""
    config = SearchConfig(
        root_directory=temp_dir,
        exclusions=[temp_dir / "docs_tool"],
        app_root=temp_dir / "docs_tool",
        config_dir=temp_dir / ".config",
    )
    set_config(config)
    yield config
    set_config(None)


@pytest.fixture
def sample_files(temp_dir: Path) -> dict[str, Path]:
    """Create a small mixed-format project tree."""
    files = {}

    # HTML page
    html = temp_dir / "notes.html"
    html.write_text(
        "<html><head><title>Notes</title><style>.hidden { color: red; }</style></head>"
        "<body><p>Hello WORLD</p><script>var secretToken = 1;</script></body></html>"
    )
    files["html"] = html

    # LaTeX source
    tex = temp_dir / "paper.tex"
    tex.write_text("% comment\nThis is \\textbf{bold} text.")
    files["tex"] = tex

    # Input file in a subdirectory
    inputs = temp_dir / "inputs"
    inputs.mkdir()
    inp = inputs / "run.inp"
    inp.write_text("RUN-SECTION\n  propagation\n  tfinal = 100.0\nend-run-section\n")
    files["inp"] = inp

    # Operator file, nested
    ops = temp_dir / "inputs" / "operators"
    ops.mkdir()
    op = ops / "model.op"
    op.write_text("HAMILTONIAN-SECTION\n modes | x | y\nend-hamiltonian-section\n")
    files["op"] = op

    # Non-target file with matching content
    txt = temp_dir / "readme.txt"
    txt.write_text("Hello world from a text file")
    files["txt"] = txt

    # The application's own directory (excluded by test_config)
    tool = temp_dir / "docs_tool"
    tool.mkdir()
    (tool / "index.html").write_text("<body>Hello from the tool itself</body>")
    files["tool"] = tool / "index.html"

    return files
