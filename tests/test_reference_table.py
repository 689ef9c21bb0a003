"""Tests for MarkdownReferenceTable."""

import logging

import pytest

from sourcelinks.domain import CharPosition, RepositoryRecord
from sourcelinks.services import MarkdownReferenceTable, RepositoryIndex

BASE = "https://github.com/org/a/blob/deadbeef/"


@pytest.fixture
def index():
    return RepositoryIndex([RepositoryRecord.create("org/a", "deadbeef", "/src/repoA")])


class TestLabels:
    """Tests for label-keyed references."""

    def test_add_returns_label_token(self):
        """Test the token for a label reference."""
        refs = MarkdownReferenceTable()
        assert refs.add("Foo.cs 3:1", "https://x/1") == "[Foo.cs 3:1]"

    def test_add_as_code(self):
        """Test code-span wrapping."""
        refs = MarkdownReferenceTable()
        assert refs.add("Foo", "https://x/1", as_code=True) == "`[Foo]`"

    def test_first_url_wins(self):
        """Test that a label keeps its first URL."""
        refs = MarkdownReferenceTable()
        refs.add("Foo", "https://x/1")
        assert refs.add("Foo", "https://x/2") == "[Foo]"
        assert refs.emit_reference_block() == "[Foo]: https://x/1\n"

    def test_labels_are_case_insensitive(self):
        """Test that labels differing only in case share one reference."""
        refs = MarkdownReferenceTable()
        refs.add("Foo", "https://x/1")
        refs.add("FOO", "https://x/2")
        assert len(refs) == 1
        assert refs.references() == [("Foo", "https://x/1")]

    def test_block_in_first_use_order(self):
        """Test that definitions are emitted once each, in first-use order."""
        refs = MarkdownReferenceTable()
        refs.add("b", "https://x/b")
        refs.add("a", "https://x/a")
        refs.add("b", "https://x/b")
        assert refs.emit_reference_block() == "[b]: https://x/b\n[a]: https://x/a\n"

    def test_empty_block(self):
        """Test that nothing is emitted when nothing was cited."""
        assert MarkdownReferenceTable().emit_reference_block() == ""


class TestFormattedReference:
    """Tests for formatted_reference."""

    def test_known_label(self):
        """Test the token for an already added label."""
        refs = MarkdownReferenceTable()
        refs.add("Foo", "https://x/1")
        assert refs.formatted_reference("Foo") == "[Foo]"
        assert refs.formatted_reference("Foo", as_code=True) == "`[Foo]`"

    def test_unknown_label_is_plain(self):
        """Test that an unknown label is returned unlinked."""
        refs = MarkdownReferenceTable()
        assert refs.formatted_reference("Nope") == "Nope"
        assert refs.formatted_reference("Nope", as_code=True) == "`Nope`"

    def test_registered_only_emitted_once_used(self):
        """Test that registered but uncited references are not emitted."""
        refs = MarkdownReferenceTable()
        refs.register("Foo", "https://x/1")
        refs.register("Bar", "https://x/2")
        assert "Foo" in refs
        assert refs.emit_reference_block() == ""

        refs.formatted_reference("Bar")
        assert refs.emit_reference_block() == "[Bar]: https://x/2\n"


class TestGeneratedIds:
    """Tests for short generated ids."""

    def test_same_label_same_id(self):
        """Test that a label keeps its generated id."""
        refs = MarkdownReferenceTable(generate_ids=True, generated_id_prefix="t")
        first = refs.add("/src/a/Foo.cs 3:1", "https://x/1")
        second = refs.add("/src/a/Foo.cs 3:1", "https://x/1")
        assert first == second == "[/src/a/Foo.cs 3:1][t0]"

    def test_ids_never_reused(self):
        """Test that distinct labels get increasing ids."""
        refs = MarkdownReferenceTable(generate_ids=True, generated_id_prefix="t")
        tokens = [refs.add(label, f"https://x/{label}") for label in ["a", "b", "a", "c"]]
        assert tokens == ["[a][t0]", "[b][t1]", "[a][t0]", "[c][t2]"]
        assert refs.emit_reference_block() == (
            "[t0]: https://x/a\n"
            "[t1]: https://x/b\n"
            "[t2]: https://x/c\n"
        )

    def test_no_prefix(self):
        """Test ids without a prefix."""
        refs = MarkdownReferenceTable(generate_ids=True)
        assert refs.add("a", "https://x/a") == "[a][0]"

    def test_formatted_reference(self):
        """Test tokens for known and unknown labels."""
        refs = MarkdownReferenceTable(generate_ids=True, generated_id_prefix="r")
        refs.add("a", "https://x/a")
        assert refs.formatted_reference("a", as_code=True) == "`[a][r0]`"
        assert refs.formatted_reference("b") == "b"


class TestSourceLinks:
    """Tests for add_source_link."""

    def test_resolved(self, index):
        """Test citing a file inside a known repository."""
        refs = MarkdownReferenceTable(index)
        token = refs.add_source_link("/src/repoA/sub/Foo.cs", CharPosition(1, 1), CharPosition(1, 5))
        assert token == "[Foo.cs 1:1]"
        assert refs.emit_reference_block() == f"[Foo.cs 1:1]: {BASE}sub/Foo.cs#L1\n"

    def test_unresolved_warns_and_returns_label(self, index, caplog):
        """Test that an unresolved file degrades to its label."""
        refs = MarkdownReferenceTable(index)
        with caplog.at_level(logging.WARNING):
            token = refs.add_source_link("/elsewhere/Foo.cs", CharPosition(2, 3))
        assert token == "Foo.cs 2:3"
        assert len(refs) == 0
        assert "Unable to create source link for Foo.cs 2:3" in caplog.text

    def test_quiet_patterns(self, index, caplog):
        """Test that configured paths are not warned about."""
        refs = MarkdownReferenceTable(index, quiet_patterns=["Microsoft.NET.Sdk"])
        with caplog.at_level(logging.WARNING):
            token = refs.add_source_link("/usr/share/dotnet/sdk/Microsoft.NET.Sdk/targets/X.targets")
        assert token == "X.targets"
        assert "Unable to create source link" not in caplog.text

    def test_requires_index(self):
        """Test that source links need a repository index."""
        with pytest.raises(ValueError):
            MarkdownReferenceTable().add_source_link("/src/Foo.cs")
