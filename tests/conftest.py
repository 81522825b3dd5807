import io
import logging

import pytest

from incbundler.backend.cache import NoEviction
from incbundler.bundler import Bundler
from incbundler.config import BundleConfig
from tests.helpers import write_file


@pytest.fixture
def capture_logs():
    """Fixture to capture log output during tests."""
    log_stream = io.StringIO()
    handler = logging.StreamHandler(log_stream)
    logger = logging.getLogger("incbundler")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    yield log_stream

    logger.removeHandler(handler)
    log_stream.close()


@pytest.fixture
def project(tmp_path):
    """A project tree with an include directory and a vendored package root.

    project/
        src/a.js, src/b.js, src/c.js
        vendor/node_modules/@scope/pkg/index.js
    """
    root = tmp_path / "project"
    write_file(root / "src" / "a.js", "var a = 1;", mtime=1_000_000)
    write_file(root / "src" / "b.js", "var b = 2;", mtime=1_000_000)
    write_file(root / "src" / "c.js", "var c = 3;", mtime=1_000_000)
    write_file(
        root / "vendor" / "node_modules" / "@scope" / "pkg" / "index.js",
        "var pkg = 4;",
        mtime=1_000_000,
    )
    return root


@pytest.fixture
def config(project, tmp_path):
    return BundleConfig(
        name="app.min.js",
        cache_dir=str(tmp_path / "cache"),
        output_dir=str(tmp_path / "dist"),
        include_dirs=[str(project)],
        node_modules=[{"root_dir": str(project / "vendor"), "packages": ["@scope"]}],
    )


@pytest.fixture
def bundler(config):
    return Bundler(config, eviction=NoEviction())
