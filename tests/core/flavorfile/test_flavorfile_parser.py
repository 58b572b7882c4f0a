"""Tests for VimFlavor parsing and the ``Flavorfile`` container."""

from __future__ import annotations

import re
from pathlib import Path

import pytest

from vimflavor.core.flavor import Flavor
from vimflavor.core.flavorfile import Flavorfile, parse_flavors
from vimflavor.exceptions import FlavorfileError, FlavorfileNotFoundError


class TestFlavorStatement:
    """Tests for single ``flavor`` lines."""

    def test_minimal_declaration(self) -> None:
        (f,) = parse_flavors("flavor 'kana/vim-smartinput'\n")
        assert f == Flavor(
            repo_name="kana/vim-smartinput",
            repo_uri="https://github.com/kana/vim-smartinput.git",
            groups=("default",),
            version_constraint=">= 0",
        )

    def test_constraint_argument(self) -> None:
        (f,) = parse_flavors("flavor 'kana/vim-textobj-user', '~> 0.3'")
        assert f.version_constraint == "~> 0.3"

    def test_double_quotes(self) -> None:
        (f,) = parse_flavors('flavor "kana/vim-smartinput", ">= 1.0"')
        assert f.repo_name == "kana/vim-smartinput"
        assert f.version_constraint == ">= 1.0"

    def test_group_option_label_form(self) -> None:
        (f,) = parse_flavors("flavor 'thinca/vim-themis', group: :development")
        assert f.groups == ("development",)

    def test_group_option_hash_rocket_form(self) -> None:
        (f,) = parse_flavors("flavor 'thinca/vim-themis', :group => 'development'")
        assert f.groups == ("development",)

    def test_name_option(self) -> None:
        (f,) = parse_flavors("flavor 'https://example.com/x.git', name: 'x'")
        assert f.repo_name == "x"
        assert f.repo_uri == "https://example.com/x.git"

    def test_comments_and_blank_lines(self) -> None:
        text = "# plugins\n\nflavor 'a/b'  # the only one\n   \n"
        assert [f.repo_name for f in parse_flavors(text)] == ["a/b"]

    def test_hash_inside_string_is_not_comment(self) -> None:
        (f,) = parse_flavors("flavor '/srv/git/#odd'")
        assert f.repo_uri == "/srv/git/#odd"


class TestGroupBlocks:
    """Tests for ``group ... do ... end`` blocks."""

    def test_block_applies_to_enclosed_flavors(self) -> None:
        text = (
            "flavor 'a/one'\n"
            "group :development do\n"
            "  flavor 'a/two'\n"
            "end\n"
            "flavor 'a/three'\n"
        )
        groups = {f.repo_name: f.groups for f in parse_flavors(text)}
        assert groups == {
            "a/one": ("default",),
            "a/two": ("development",),
            "a/three": ("default",),
        }

    def test_multiple_group_names(self) -> None:
        text = "group :development, :test do\n  flavor 'a/b'\nend\n"
        (f,) = parse_flavors(text)
        assert f.groups == ("development", "test")

    def test_option_overrides_block(self) -> None:
        text = "group :development do\n  flavor 'a/b', group: :test\nend\n"
        (f,) = parse_flavors(text)
        assert f.groups == ("test",)

    def test_unclosed_block(self) -> None:
        with pytest.raises(FlavorfileError, match="unclosed group"):
            parse_flavors("group :dev do\nflavor 'a/b'\n")

    def test_stray_end(self) -> None:
        with pytest.raises(FlavorfileError, match="'end' without 'group'"):
            parse_flavors("end\n")

    def test_group_without_do(self) -> None:
        with pytest.raises(FlavorfileError, match="must end with 'do'"):
            parse_flavors("group :dev\n")


class TestSyntaxErrors:
    """Malformed lines raise FlavorfileError naming the line."""

    @pytest.mark.parametrize(
        "line",
        [
            "flavor",
            "flavor kana/vim-smartinput",
            "flavor 'a/b',",
            "flavor 'a/b', '>= 1', 'extra'",
            "flavor 'a/b', branch: 'main'",
            "flavor 'a/b', group: :dev, '>= 1'",
            "plugin 'a/b'",
            "flavor 'a/b' ; system('rm -rf /')",
        ],
    )
    def test_rejected(self, line: str) -> None:
        with pytest.raises(FlavorfileError, match="VimFlavor:2"):
            parse_flavors("# header\n" + line)

    def test_invalid_constraint(self) -> None:
        with pytest.raises(FlavorfileError, match="Invalid version constraint"):
            parse_flavors("flavor 'a/b', '> 1'")


class TestFlavorfile:
    """Tests for the ``Flavorfile`` container."""

    def test_preserves_declaration_order(self) -> None:
        ff = Flavorfile.parse("flavor 'z/z'\nflavor 'a/a'\nflavor 'm/m'\n")
        assert [f.repo_name for f in ff] == ["z/z", "a/a", "m/m"]
        assert list(ff.flavors) == [f.repo_uri for f in ff]
        assert len(ff) == 3

    def test_duplicate_repository_rejected(self) -> None:
        with pytest.raises(FlavorfileError, match="more than once"):
            Flavorfile.parse("flavor 'a/b'\nflavor 'a/b', '~> 1.0'\n")

    def test_read_from_disk(self, tmp_path: Path) -> None:
        path = tmp_path / "VimFlavor"
        path.write_text("flavor 'kana/vim-smartinput'\nflavor 'kana/vim-smarttill'\n")
        ff = Flavorfile.read(path)
        assert len(ff) == 2

    def test_read_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FlavorfileNotFoundError):
            Flavorfile.read(tmp_path / "VimFlavor")

    def test_read_error_names_file(self, tmp_path: Path) -> None:
        path = tmp_path / "VimFlavor"
        path.write_text("bogus\n")
        with pytest.raises(FlavorfileError, match=re.escape(f"{path}:1")):
            Flavorfile.read(path)
