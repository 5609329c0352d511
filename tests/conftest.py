"""Shared fixtures for dirsyncer tests."""

import os

import pytest


# Fixed reference time (2024-01-01T00:00:00Z) in nanoseconds
BASE_NS = 1_704_067_200 * 1_000_000_000
SECOND_NS = 1_000_000_000


def write_tree(root, files, mtime_ns=BASE_NS):
    """Create files under root from a {relative_path: content} mapping."""
    root.mkdir(parents=True, exist_ok=True)
    for rel_path, content in files.items():
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            content = content.encode()
        path.write_bytes(content)
        os.utime(path, ns=(mtime_ns, mtime_ns))
    return root


def set_mtime(path, mtime_ns):
    os.utime(path, ns=(mtime_ns, mtime_ns))


def read_tree(root):
    """Return {relative_path: bytes} for every file under root."""
    result = {}
    for dirpath, _, filenames in os.walk(root):
        for name in filenames:
            full = os.path.join(dirpath, name)
            with open(full, 'rb') as f:
                result[os.path.relpath(full, root)] = f.read()
    return result


@pytest.fixture
def source(tmp_path):
    d = tmp_path / "source"
    d.mkdir()
    return d


@pytest.fixture
def target(tmp_path):
    d = tmp_path / "target"
    d.mkdir()
    return d


@pytest.fixture
def qapp():
    """A QCoreApplication for worker tests; no display needed."""
    from PyQt6.QtCore import QCoreApplication
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app
