"""
Repository index for sourcelinks.

Discovers git checkouts under (and directly above) a scan root and answers
"which repository owns this file" with a longest-prefix match, so nested
checkouts resolve to the innermost repository. Lookups that fall outside
the scanned tree expand the index on demand.

The index is append-only and not thread-safe: owner_of() may add records,
so concurrent callers must serialize access.
"""

from typing import Iterable, Iterator, List, Optional, Set, Tuple
import logging
import os

from ..domain import RepositoryRecord, normalize_path
from ..domain.repository import with_trailing_sep
from ..exit_codes import MalformedPointerError
from ..infra import GitClient, GIT_DIR_NAME

logger = logging.getLogger(__name__)

# Upper bound on ancestors inspected when looking for an enclosing repo
MAX_ANCESTOR_DEPTH = 256


class RepositoryIndex:
    """
    Append-only collection of discovered repositories.

    Example:
        index = RepositoryIndex.from_scan("/src")
        repo = index.owner_of("/src/app/Program.cs")
        if repo:
            print(repo.name, repo.relative_path("/src/app/Program.cs"))
    """

    def __init__(
        self,
        repositories: Optional[Iterable[RepositoryRecord]] = None,
        scanned_root: Optional[str] = None,
        git_client: Optional[GitClient] = None,
        max_ancestor_depth: int = MAX_ANCESTOR_DEPTH,
    ):
        """
        Initialize RepositoryIndex.

        Args:
            repositories: Records to start with
            scanned_root: Directory already fully scanned; files below it are
                never used to trigger lazy discovery. None disables lazy
                discovery entirely.
            git_client: Client used to read FETCH_HEAD (creates default if None)
            max_ancestor_depth: Cap on the upward search for an enclosing repo
        """
        self.git = git_client or GitClient()
        self.scanned_root = normalize_path(scanned_root) if scanned_root else None
        self.max_ancestor_depth = max_ancestor_depth
        self._repositories: List[RepositoryRecord] = []
        self._roots: Set[str] = set()
        # Directories already scanned by lazy expansion
        self._expanded: Set[str] = set()
        if repositories:
            self.extend(repositories)

    @classmethod
    def from_scan(
        cls,
        scan_root: Optional[str],
        git_client: Optional[GitClient] = None,
        strict: bool = True,
    ) -> 'RepositoryIndex':
        """
        Build an index by scanning scan_root.

        With no scan root the index starts empty and never expands, so every
        citation falls back to a plain label.
        """
        index = cls(scanned_root=scan_root, git_client=git_client)
        if scan_root:
            index.extend(index.discover_roots(scan_root, strict=strict))
        return index

    @property
    def repositories(self) -> Tuple[RepositoryRecord, ...]:
        """Snapshot of the records held, in discovery order."""
        return tuple(self._repositories)

    def __len__(self) -> int:
        return len(self._repositories)

    def __iter__(self) -> Iterator[RepositoryRecord]:
        return iter(self.repositories)

    def add(self, repo: RepositoryRecord) -> bool:
        """Add a record unless one with the same root is already held."""
        if repo.root_path in self._roots:
            return False
        self._roots.add(repo.root_path)
        self._repositories.append(repo)
        return True

    def extend(self, repos: Iterable[RepositoryRecord]) -> int:
        """Add several records, returning how many were new."""
        return sum(1 for repo in repos if self.add(repo))

    def _scan_start(self, directory_root) -> Optional[str]:
        path = normalize_path(directory_root)
        if os.path.isdir(path):
            return path
        if os.path.isfile(path):
            return os.path.dirname(path)
        return None

    def discover_roots(self, directory_root, strict: bool = False) -> List[RepositoryRecord]:
        """
        Find repositories at, below and directly above directory_root.

        Every ``.git`` directory below directory_root yields a record. Then
        the ancestors of directory_root are walked upward and the first one
        holding a ``.git`` directory is added as well.

        A path to a file is replaced by its directory. A path that does not
        exist is logged and yields nothing.

        Args:
            directory_root: Directory (or file) to scan from
            strict: Propagate FETCH_HEAD errors for directory_root itself.
                Repositories found deeper in the tree, and the enclosing
                ancestor repo, are skipped with a warning when unreadable.

        Returns:
            Discovered records (not yet added to the index)

        Raises:
            MalformedPointerError: In strict mode, for an explicit target
        """
        start = self._scan_start(directory_root)
        if start is None:
            logger.warning(f"DirectoryRoot '{directory_root}' to scan for git repos does not exist")
            return []

        logger.info(f"Checking for .git directories in {start}")
        found: List[RepositoryRecord] = []

        for dirpath, dirnames, _ in os.walk(start, onerror=self._log_walk_error):
            dirnames.sort()
            if GIT_DIR_NAME not in dirnames:
                continue
            # Never descend into the metadata directory itself
            dirnames.remove(GIT_DIR_NAME)
            git_dir = os.path.join(dirpath, GIT_DIR_NAME)
            explicit = strict and dirpath == start
            repo = self._read(git_dir, explicit)
            if repo is not None:
                found.append(repo)
                logger.info(f"    .git directories: {git_dir}\n        parent: {repo.root_path}")

        ancestor = self._enclosing_repo_root(start)
        if ancestor is not None:
            repo = self._read(ancestor, explicit=False)
            if repo is not None:
                found.append(repo)
                logger.info(f"    enclosing repository: {repo.root_path}")

        return found

    def _enclosing_repo_root(self, directory: str) -> Optional[str]:
        """First ancestor of directory that directly holds a .git directory."""
        for _ in range(self.max_ancestor_depth):
            parent = os.path.dirname(directory)
            if parent == directory:
                return None
            if self.git.is_git_repo(parent):
                return parent
            directory = parent
        logger.warning(f"Stopped looking for an enclosing repository after {self.max_ancestor_depth} levels")
        return None

    def _read(self, git_dir: str, explicit: bool) -> Optional[RepositoryRecord]:
        try:
            return self.git.read_repository(git_dir)
        except MalformedPointerError as e:
            if explicit:
                raise
            logger.warning(f"Skipping repository at {git_dir}: {e}")
            return None

    @staticmethod
    def _log_walk_error(error: OSError) -> None:
        logger.debug(f"Unable to scan {error.filename}: {error.strerror}")

    def find_owner(self, file_path) -> Optional[RepositoryRecord]:
        """Longest-prefix owner among the records already held. No discovery."""
        file_path = normalize_path(file_path)
        candidates = [repo for repo in self._repositories
                      if file_path.startswith(with_trailing_sep(repo.root_path))]
        if not candidates:
            return None
        return max(candidates, key=lambda repo: len(repo.root_path))

    def owner_of(self, file_path) -> Optional[RepositoryRecord]:
        """
        Repository owning file_path, discovering new repositories if needed.

        When no held record matches and the path lies outside the scanned
        root, the path's directory is scanned once (non-strict) and the lookup
        is retried. Directories already scanned this way are not rescanned.

        Returns:
            The innermost owning repository, or None if there is none
        """
        file_path = normalize_path(file_path)
        repo = self.find_owner(file_path)
        if repo is not None or not self._may_expand(file_path):
            return repo

        start = self._scan_start(file_path) or file_path
        if start in self._expanded:
            return None
        self._expanded.add(start)

        added = self.extend(self.discover_roots(file_path, strict=False))
        if added:
            logger.debug(f"Added {added} repositories while resolving {file_path}")
        return self.find_owner(file_path)

    def _may_expand(self, file_path: str) -> bool:
        if self.scanned_root is None:
            return False
        return not file_path.startswith(with_trailing_sep(self.scanned_root))
