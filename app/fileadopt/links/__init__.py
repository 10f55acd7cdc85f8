"""Hard-coded file link detection."""

from fileadopt.links.scanner import LinkScanner, TextSource, extract_links

__all__ = ["LinkScanner", "TextSource", "extract_links"]
