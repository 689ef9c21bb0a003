"""End-to-end tests for the SourceLocator API."""

import pytest

import sourcelinks
from sourcelinks import CharPosition, SourceLocator
from sourcelinks.exit_codes import MalformedPointerError


def create_git_repo(fs, path, name="org/repo", sha="deadbeef"):
    """Helper to create a fake checkout with a FETCH_HEAD."""
    fs.create_file(
        f"{path}/.git/FETCH_HEAD",
        contents=f"{sha}\t\tbranch 'main' of https://github.com/{name}\n",
    )
    return path


@pytest.fixture
def workspace(fs):
    create_git_repo(fs, "/scan/repoA", "org/a", "deadbeef")
    fs.create_file("/scan/repoA/sub/Foo.cs")
    fs.create_file("/scan/repoA/sub/Foo.csproj")
    return "/scan"


class TestSourceLocator:
    """Tests for SourceLocator."""

    def test_end_to_end_permalink(self, workspace):
        """Test the permalink for a single-line citation."""
        locator = SourceLocator.from_paths(workspace, output_dir="/out")
        url = locator.github_source_link("/scan/repoA/sub/Foo.cs", 1, 1)
        assert url == "https://github.com/org/a/blob/deadbeef/sub/Foo.cs#L1"

    def test_markdown_link_and_references(self, workspace):
        """Test inline and reference-style links for the same citation."""
        locator = SourceLocator.from_paths(workspace, output_dir="/out")
        start, end = CharPosition(1, 1), CharPosition(4, 2)
        assert locator.formatted_github_source_link("/scan/repoA/sub/Foo.cs", start, end) == (
            "[Foo.cs 1:1-4:2](https://github.com/org/a/blob/deadbeef/sub/Foo.cs#L1-#L4)"
        )

        refs = locator.reference_table(generate_ids=True, generated_id_prefix="s")
        assert refs.add_source_link("/scan/repoA/sub/Foo.cs", start, end) == "[Foo.cs 1:1-4:2][s0]"
        assert refs.emit_reference_block() == (
            "[s0]: https://github.com/org/a/blob/deadbeef/sub/Foo.cs#L1-#L4\n"
        )

    def test_projects_are_registered(self, workspace):
        """Test that project files are scanned at construction."""
        locator = SourceLocator.from_paths(workspace)
        project = locator.get_project("Foo")
        assert project.repo_relative_path == "sub/Foo.csproj"
        assert [p.project_name for p in locator.get_projects_copy()] == ["Foo"]

    def test_no_scan_dir_degrades_to_labels(self, workspace):
        """Test that without a scan root every citation is a plain label."""
        locator = SourceLocator.from_paths(None)
        assert locator.repositories == ()
        assert locator.github_source_link("/scan/repoA/sub/Foo.cs", 1) is None
        assert locator.formatted_github_source_link("/scan/repoA/sub/Foo.cs", CharPosition(1, 1)) == "Foo.cs 1:1"

    def test_unreadable_scan_root_repository_is_fatal(self, fs):
        """Test that the scan root's own repository must have a FETCH_HEAD."""
        fs.create_dir("/scan/repoA/.git")
        with pytest.raises(MalformedPointerError):
            SourceLocator.from_paths("/scan/repoA")

    def test_chart_link(self, workspace):
        """Test chart links relative to the output directory."""
        locator = SourceLocator.from_paths(workspace, output_dir="/out")
        assert locator.markdown_chart_link("todo") == "![todo](charts/todo.png)"

    def test_create_from_config(self, workspace, fs):
        """Test building a locator from a configuration dict."""
        config = {
            "report": {"output_dir": "/out", "source_scan_dir": workspace},
            "links": {"generate_ids": True, "generated_id_prefix": "x"},
        }
        locator = sourcelinks.create(config)
        assert fs.exists("/out/charts")
        assert fs.exists("/out/metadata")
        assert fs.exists("/out/test_failures")
        refs = locator.reference_table()
        assert refs.add("label", "https://x") == "[label][x0]"
