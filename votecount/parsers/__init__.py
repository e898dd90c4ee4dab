"""Election file parsers."""

from .base import ElectionFileParser

# Parser registry - import parsers here to register them
_parsers: list[type[ElectionFileParser]] = []


def register_parser(parser_class: type[ElectionFileParser]) -> type[ElectionFileParser]:
    """Decorator to register a parser class."""
    _parsers.append(parser_class)
    return parser_class


def get_all_parsers() -> list[type[ElectionFileParser]]:
    """Return all registered parser classes."""
    return _parsers.copy()


def detect_parser(source: str) -> ElectionFileParser | None:
    """Auto-detect and return an appropriate parser instance for the given source."""
    for parser_class in _parsers:
        parser = parser_class()
        if parser.can_parse(source):
            return parser
    return None


def detect_parser_by_content(content: bytes, filename: str) -> ElectionFileParser | None:
    """Return a parser instance that recognizes the content, or None."""
    for parser_class in _parsers:
        parser = parser_class()
        if parser.can_parse_content(content, filename):
            return parser
    return None


def get_supported_formats() -> str:
    """Return a user-friendly description of supported file formats."""
    lines = ["We currently support:"]
    for parser_class in _parsers:
        example = getattr(parser_class, "EXAMPLE_SOURCE", None)
        if example:
            lines.append(f"  - {example}")
    return "\n".join(lines)
