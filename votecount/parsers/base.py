"""Abstract base class for election file parsers."""

from abc import ABC, abstractmethod

from votecount.models import Election


class ElectionFileError(ValueError):
    """Raised when an election file's header or counts are malformed."""
    pass


class ElectionFileParser(ABC):
    """Abstract base class for parsing election files.

    Each parser implementation handles one file format. Parsers are
    registered via the @register_parser decorator in
    votecount/parsers/__init__.py.
    """

    @abstractmethod
    def can_parse(self, source: str) -> bool:
        """Check if this parser can handle the given source.

        Args:
            source: URL or filename to check

        Returns:
            True if this parser can handle the source, False otherwise
        """
        pass

    def can_parse_content(self, content: bytes, filename: str) -> bool:
        """Check if this parser can handle the given file content.

        Used for uploads whose name gives nothing away. Subclasses should
        override this to inspect file content for tell-tale signs of their
        format.

        Args:
            content: Raw bytes of the uploaded file
            filename: Uploaded filename (may help with basic filtering)

        Returns:
            True if this parser can likely handle the content, False otherwise
        """
        return False

    @abstractmethod
    def parse(self, source: str, content: bytes) -> Election:
        """Parse the content into an Election.

        Args:
            source: URL or filename the content came from (for context)
            content: Raw bytes of the file content

        Returns:
            Parsed Election object

        Raises:
            ElectionFileError: If the content cannot be parsed
        """
        pass
