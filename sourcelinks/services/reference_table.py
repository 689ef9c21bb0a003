"""
Markdown reference-link table for sourcelinks.

Reports cite the same source locations many times. Instead of repeating
long permalinks inline, citations are written as reference-style links
(``[Foo.cs 3:1]``) and the definitions (``[Foo.cs 3:1]: https://...``) are
emitted once, at the end of a section.

Labels compare case-insensitively; the first URL registered for a label
wins. With ``generate_ids`` on, every distinct label gets a short id
(``{prefix}{n}``) and tokens take the form ``[label][id]``.
"""

from typing import Dict, List, Optional, Sequence, Tuple
import logging

from ..domain import CharPosition, SourceCitation
from .link_formatter import formatted_position, github_source_link
from .repository_index import RepositoryIndex

logger = logging.getLogger(__name__)


class MarkdownReferenceTable:
    """
    Deduplicating collection of markdown link references.

    Example:
        refs = MarkdownReferenceTable(index)
        text = "Found in " + refs.add_source_link("/src/app/Foo.cs", CharPosition(3, 1))
        text += "\\n\\n" + refs.emit_reference_block()
    """

    def __init__(
        self,
        repo_index: Optional[RepositoryIndex] = None,
        generate_ids: bool = False,
        generated_id_prefix: Optional[str] = None,
        quiet_patterns: Sequence[str] = (),
    ):
        """
        Initialize MarkdownReferenceTable.

        Args:
            repo_index: Index used by add_source_link()
            generate_ids: Replace labels by short generated ids in references
            generated_id_prefix: Prefix for generated ids
            quiet_patterns: Substrings of paths whose unresolved links are
                not worth a warning (e.g. SDK files outside any checkout)
        """
        self.repo_index = repo_index
        self.generate_ids = generate_ids
        self.generated_id_prefix = generated_id_prefix or ""
        self.quiet_patterns = tuple(quiet_patterns)
        # casefolded key -> (reference key as first written, url)
        self._url_map: Dict[str, Tuple[str, str]] = {}
        self._used_urls: Dict[str, Tuple[str, str]] = {}
        # casefolded label -> generated id
        self._generated_ids: Dict[str, str] = {}
        self._id_seq = 0

    @staticmethod
    def _key(text: str) -> str:
        return text.casefold()

    @staticmethod
    def _wrap(token: str, as_code: bool) -> str:
        return f"`{token}`" if as_code else token

    def _reference_key(self, label: str) -> Optional[str]:
        if self.generate_ids:
            return self._generated_ids.get(self._key(label))
        entry = self._url_map.get(self._key(label))
        return entry[0] if entry else None

    def _token(self, label: str, reference_key: str) -> str:
        if self.generate_ids:
            return f"[{label}][{reference_key}]"
        return f"[{label}]"

    def _mark_used(self, reference_key: str) -> None:
        key = self._key(reference_key)
        if key not in self._used_urls:
            self._used_urls[key] = self._url_map[key]

    def register(self, label: str, url: str) -> str:
        """
        Record a URL for label without citing it.

        Returns:
            The reference key (the label itself, or its generated id)
        """
        if self.generate_ids:
            label_key = self._key(label)
            reference_key = self._generated_ids.get(label_key)
            if reference_key is None:
                reference_key = f"{self.generated_id_prefix}{self._id_seq}"
                self._id_seq += 1
                self._generated_ids[label_key] = reference_key
        else:
            reference_key = self._reference_key(label) or label
        self._url_map.setdefault(self._key(reference_key), (reference_key, url))
        return reference_key

    def add(self, label: str, url: str, as_code: bool = False) -> str:
        """
        Register url for label and return a citation token for it.

        Adding a label a second time keeps the first URL.
        """
        reference_key = self.register(label, url)
        self._mark_used(reference_key)
        return self._wrap(self._token(label, reference_key), as_code)

    def formatted_reference(self, label: str, as_code: bool = False) -> str:
        """
        Citation token for a known label, or the plain label if unknown.
        """
        reference_key = self._reference_key(label)
        if reference_key is None:
            return self._wrap(label, as_code)
        self._mark_used(reference_key)
        return self._wrap(self._token(label, reference_key), as_code)

    def add_source_link(
        self,
        file_path,
        start: Optional[CharPosition] = None,
        end: Optional[CharPosition] = None,
    ) -> str:
        """
        Cite a source location, falling back to its plain label.

        Raises:
            ValueError: If the table was created without a repository index
        """
        if self.repo_index is None:
            raise ValueError("add_source_link requires a repository index")

        label = formatted_position(file_path, start, end)
        start_line, end_line = SourceCitation(file_path, start, end).lines
        url = github_source_link(self.repo_index, file_path, start_line, end_line)
        if url is None:
            path = str(file_path)
            if not any(pattern in path for pattern in self.quiet_patterns):
                logger.warning(f"Unable to create source link for {label} ({path})")
            return label
        return self.add(label, url)

    def __len__(self) -> int:
        return len(self._used_urls)

    def __contains__(self, label: str) -> bool:
        return self._reference_key(label) is not None

    def references(self) -> List[Tuple[str, str]]:
        """(reference key, url) pairs that were cited, in first-use order."""
        return list(self._used_urls.values())

    def emit_reference_block(self) -> str:
        """Markdown link definitions for every cited reference."""
        return "".join(f"[{key}]: {url}\n" for key, url in self.references())
