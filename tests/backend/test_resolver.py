"""
Tests for module specifier resolution.

These tests verify:
- Which roots a specifier is searched in
- Fallback suffix order
- Root precedence
- Relative path (cache key) derivation
"""

import pytest

from incbundler.backend.resolver import (
    is_relative_specifier,
    relative_to_root,
    resolve,
    split_package_specifier,
)
from incbundler.exceptions import NotFoundError
from incbundler.model import IncludeDirectory, PackageRoot
from tests.helpers import write_file


@pytest.mark.short
class TestSpecifierClassification:
    def test_dot_prefixes_are_relative(self):
        assert is_relative_specifier("./a")
        assert is_relative_specifier("../a")
        assert is_relative_specifier(".")

    def test_package_names_are_bare(self):
        assert not is_relative_specifier("@scope/pkg")
        assert not is_relative_specifier("lodash")
        assert not is_relative_specifier("node_modules/lodash")

    def test_split_adds_vendor_prefix(self):
        assert split_package_specifier("@scope/pkg") == (
            "@scope/pkg",
            "node_modules/@scope/pkg",
        )

    def test_split_strips_existing_vendor_prefix(self):
        assert split_package_specifier("node_modules/@scope/pkg") == (
            "@scope/pkg",
            "node_modules/@scope/pkg",
        )


@pytest.mark.short
class TestResolveRelative:
    def test_exact_file(self, tmp_path):
        write_file(tmp_path / "src" / "a.js", "a")
        resolved = resolve("./src/a.js", [IncludeDirectory(tmp_path)])

        assert resolved.local_path == tmp_path / "src" / "a.js"
        assert resolved.relative_path == "src/a.js"
        assert resolved.root == IncludeDirectory(tmp_path)

    def test_js_suffix(self, tmp_path):
        write_file(tmp_path / "src" / "a.js", "a")
        resolved = resolve("./src/a", [IncludeDirectory(tmp_path)])
        assert resolved.relative_path == "src/a.js"

    def test_js_wins_over_json(self, tmp_path):
        write_file(tmp_path / "x.js", "js")
        write_file(tmp_path / "x.json", "{}")
        resolved = resolve("./x", [IncludeDirectory(tmp_path)])
        assert resolved.relative_path == "x.js"

    def test_json_suffix(self, tmp_path):
        write_file(tmp_path / "data.json", "{}")
        resolved = resolve("./data", [IncludeDirectory(tmp_path)])
        assert resolved.relative_path == "data.json"

    def test_index_js(self, tmp_path):
        write_file(tmp_path / "lib" / "index.js", "idx")
        write_file(tmp_path / "lib" / "index.json", "{}")
        resolved = resolve("./lib", [IncludeDirectory(tmp_path)])
        assert resolved.relative_path == "lib/index.js"

    def test_index_json(self, tmp_path):
        write_file(tmp_path / "lib" / "index.json", "{}")
        resolved = resolve("./lib", [IncludeDirectory(tmp_path)])
        assert resolved.relative_path == "lib/index.json"

    def test_file_sibling_beats_index(self, tmp_path):
        write_file(tmp_path / "lib.js", "file")
        write_file(tmp_path / "lib" / "index.js", "idx")
        resolved = resolve("./lib", [IncludeDirectory(tmp_path)])
        assert resolved.relative_path == "lib.js"

    def test_directory_is_not_a_hit(self, tmp_path):
        (tmp_path / "empty").mkdir()
        with pytest.raises(NotFoundError):
            resolve("./empty", [IncludeDirectory(tmp_path)])

    def test_first_include_directory_wins(self, tmp_path):
        first = tmp_path / "first"
        second = tmp_path / "second"
        write_file(first / "a.js", "first")
        write_file(second / "a.js", "second")

        resolved = resolve("./a", [IncludeDirectory(first), IncludeDirectory(second)])

        assert resolved.local_path == first / "a.js"
        assert resolved.local_path.read_text() == "first"

    def test_falls_through_to_later_root(self, tmp_path):
        first = tmp_path / "first"
        second = tmp_path / "second"
        first.mkdir()
        write_file(second / "a.js", "second")

        resolved = resolve("./a", [IncludeDirectory(first), IncludeDirectory(second)])
        assert resolved.root.path == second

    def test_first_root_with_any_suffix_hit_wins(self, tmp_path):
        """A suffix hit in the first root beats an exact hit in a later one."""
        first = tmp_path / "first"
        second = tmp_path / "second"
        write_file(first / "a" / "index.json", "{}")
        write_file(second / "a.js", "exact")

        resolved = resolve("./a", [IncludeDirectory(first), IncludeDirectory(second)])
        assert resolved.local_path == first / "a" / "index.json"

    def test_relative_ignores_package_roots(self, tmp_path):
        write_file(tmp_path / "node_modules" / "a.js", "a")
        roots = [PackageRoot(tmp_path, ("a",))]
        with pytest.raises(NotFoundError):
            resolve("./node_modules/a", roots)

    def test_parent_segments_are_normalized(self, tmp_path):
        write_file(tmp_path / "src" / "a.js", "a")
        resolved = resolve("./lib/../src/a", [IncludeDirectory(tmp_path)])
        assert resolved.local_path == tmp_path / "src" / "a.js"
        assert resolved.relative_path == "src/a.js"

    def test_deterministic(self, tmp_path):
        write_file(tmp_path / "src" / "a.js", "a")
        roots = [IncludeDirectory(tmp_path)]
        assert resolve("./src/a", roots) == resolve("./src/a", roots)


@pytest.mark.short
class TestResolvePackage:
    def test_bare_specifier_in_package_root(self, tmp_path):
        write_file(tmp_path / "node_modules" / "@scope" / "pkg" / "index.js", "p")
        resolved = resolve("@scope/pkg", [PackageRoot(tmp_path, ("@scope",))])

        assert resolved.relative_path == "node_modules/@scope/pkg/index.js"

    def test_prefixed_specifier(self, tmp_path):
        write_file(tmp_path / "node_modules" / "@scope" / "pkg" / "index.js", "p")
        resolved = resolve(
            "node_modules/@scope/pkg", [PackageRoot(tmp_path, ("@scope",))]
        )
        assert resolved.relative_path == "node_modules/@scope/pkg/index.js"

    def test_suffix_priority_for_bare_specifier(self, tmp_path):
        write_file(tmp_path / "node_modules" / "x.js", "js")
        write_file(tmp_path / "node_modules" / "x.json", "{}")
        resolved = resolve("x", [PackageRoot(tmp_path, ("x",))])
        assert resolved.relative_path == "node_modules/x.js"

    def test_allow_list_is_prefix_match(self, tmp_path):
        write_file(tmp_path / "node_modules" / "@scope" / "utils" / "index.js", "u")
        write_file(tmp_path / "node_modules" / "@scope" / "dom" / "index.js", "d")
        roots = [PackageRoot(tmp_path, ("@scope/",))]

        assert resolve("@scope/utils", roots).relative_path.endswith("utils/index.js")
        assert resolve("@scope/dom", roots).relative_path.endswith("dom/index.js")

    def test_root_not_allowed_is_skipped(self, tmp_path):
        other = tmp_path / "other"
        allowed = tmp_path / "allowed"
        write_file(other / "node_modules" / "lib.js", "other")
        write_file(allowed / "node_modules" / "lib.js", "allowed")
        roots = [PackageRoot(other, ("react",)), PackageRoot(allowed, ("lib",))]

        resolved = resolve("lib", roots)
        assert resolved.root.path == allowed

    def test_bare_ignores_include_directories(self, tmp_path):
        write_file(tmp_path / "node_modules" / "lib.js", "lib")
        with pytest.raises(NotFoundError):
            resolve("lib", [IncludeDirectory(tmp_path)])

    def test_no_eligible_root(self, tmp_path):
        write_file(tmp_path / "node_modules" / "lib.js", "lib")
        with pytest.raises(NotFoundError):
            resolve("lib", [PackageRoot(tmp_path, ("other",))])


@pytest.mark.short
class TestNotFound:
    def test_empty_roots(self):
        with pytest.raises(NotFoundError) as exc_info:
            resolve("./a", [])
        assert exc_info.value.specifier == "./a"

    def test_carries_original_specifier(self, tmp_path):
        with pytest.raises(NotFoundError) as exc_info:
            resolve("./missing/module", [IncludeDirectory(tmp_path)])

        assert exc_info.value.specifier == "./missing/module"
        assert "./missing/module" in str(exc_info.value)

    def test_bare_carries_specifier_without_prefix(self, tmp_path):
        with pytest.raises(NotFoundError) as exc_info:
            resolve("@scope/none", [PackageRoot(tmp_path, ("@scope",))])
        assert exc_info.value.specifier == "@scope/none"


@pytest.mark.short
def test_relative_to_root_uses_forward_slashes(tmp_path):
    path = tmp_path / "a" / "b" / "c.js"
    assert relative_to_root(path, tmp_path) == "a/b/c.js"
