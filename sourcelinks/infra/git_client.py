"""
Git client infrastructure for sourcelinks.

Reads the little repository metadata that permalinks need: the FETCH_HEAD
file recording the last fetched commit and the GitHub remote it came from.
No git commands are run and no objects are parsed.

Keeping this behind a client class makes it:
- Easy to mock for testing
- Consistent in error handling
- Isolated from the index logic
"""

import logging
import os
import re
from dataclasses import dataclass

from ..domain import RepositoryRecord
from ..exit_codes import MalformedPointerError

logger = logging.getLogger(__name__)

GIT_DIR_NAME = '.git'
FETCH_HEAD_NAME = 'FETCH_HEAD'

# <sha> <TAB> [not-for-merge] <TAB> branch 'main' of https://github.com/org/repo
FETCH_HEAD_PATTERN = re.compile(
    r'^(?P<commit_sha>[0-9a-f]+)\s.*github\.com[/:](?P<name>.+)$',
    re.MULTILINE,
)


@dataclass(frozen=True)
class FetchHead:
    """Remote repository name and commit taken from a FETCH_HEAD file."""
    name: str
    commit_sha: str


class GitClient:
    """
    Reads repository pointers from ``.git`` directories.

    Example:
        client = GitClient()
        repo = client.read_repository("/src/app/.git")
        print(repo.permalink_base)
    """

    def __init__(self, encoding: str = 'utf-8'):
        """
        Initialize GitClient.

        Args:
            encoding: Encoding used to read FETCH_HEAD (default: utf-8)
        """
        self.encoding = encoding

    def is_git_repo(self, path) -> bool:
        """Check if path directly contains a .git directory."""
        return os.path.isdir(os.path.join(path, GIT_DIR_NAME))

    def repository_root(self, git_dir) -> str:
        """
        Working-tree root for a pointer directory.

        A directory literally named ``.git`` belongs to its parent; any other
        directory is taken to be the root itself.
        """
        git_dir = os.path.normpath(os.path.abspath(os.fspath(git_dir)))
        if os.path.basename(git_dir) == GIT_DIR_NAME:
            return os.path.dirname(git_dir)
        return git_dir

    def fetch_head_path(self, root) -> str:
        return os.path.join(root, GIT_DIR_NAME, FETCH_HEAD_NAME)

    def parse_fetch_head(self, text: str) -> FetchHead:
        """
        Extract the repository name and commit from FETCH_HEAD contents.

        Raises:
            MalformedPointerError: If no line names a GitHub remote
        """
        match = FETCH_HEAD_PATTERN.search(text)
        if not match:
            raise MalformedPointerError("FETCH_HEAD does not reference a GitHub remote")

        name = match.group('name').strip().rstrip('/')
        if name.endswith('.git'):
            name = name[:-len('.git')]
        return FetchHead(name=name, commit_sha=match.group('commit_sha'))

    def read_fetch_head(self, root) -> FetchHead:
        """
        Read and parse FETCH_HEAD for the repository rooted at root.

        Raises:
            MalformedPointerError: If the file is missing, unreadable or
                does not match the expected format
        """
        path = self.fetch_head_path(root)
        try:
            with open(path, 'r', encoding=self.encoding, errors='replace') as f:
                text = f.read()
        except OSError as e:
            raise MalformedPointerError(f"Unable to read {path}: {e}", path=path) from e

        try:
            return self.parse_fetch_head(text)
        except MalformedPointerError as e:
            raise MalformedPointerError(f"{e}: {path}", path=path) from None

    def read_repository(self, git_dir) -> RepositoryRecord:
        """
        Build a RepositoryRecord for a ``.git`` directory or a repository root.

        Args:
            git_dir: Path to a ``.git`` directory, or to the directory holding it

        Returns:
            RepositoryRecord with the permalink base precomputed
        """
        root = self.repository_root(git_dir)
        fetch_head = self.read_fetch_head(root)
        repo = RepositoryRecord.create(fetch_head.name, fetch_head.commit_sha, root)
        logger.debug(f"Read {repo.name}@{repo.commit_sha} from {root}")
        return repo
