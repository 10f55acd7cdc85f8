"""Canonical URI handling for files under the public root.

Every file is keyed by a scheme-qualified URI such as ``public://a/b.txt``.
Repeated separators directly after the scheme marker are collapsed so that
``public:///a/b.txt`` and ``public://a/b.txt`` refer to the same row.
"""

import posixpath
import re

PUBLIC_SCHEME = "public://"

# Matches "/sites/<site>/files/<rest>" in absolute or site-relative links.
_SITE_FILES_RE = re.compile(r"/sites/[^/]+/files/(.+)$")


def canonicalize(uri: str) -> str:
    """Normalize a file identifier to its canonical form.

    Strings without the scheme prefix are returned unchanged.

    Args:
        uri: Scheme-qualified URI or bare relative path.

    Returns:
        Canonical URI.
    """
    if not uri.startswith(PUBLIC_SCHEME):
        return uri
    return PUBLIC_SCHEME + uri[len(PUBLIC_SCHEME) :].lstrip("/")


def is_public(uri: str) -> bool:
    """Check whether a URI lives under the public scheme."""
    return uri.startswith(PUBLIC_SCHEME)


def to_uri(relative_path: str) -> str:
    """Build the canonical URI for a path relative to the public root."""
    return canonicalize(PUBLIC_SCHEME + relative_path.replace("\\", "/"))


def to_relative(uri: str) -> str:
    """Return the path relative to the public root for a public URI.

    Non-public strings are returned unchanged.
    """
    uri = canonicalize(uri)
    if uri.startswith(PUBLIC_SCHEME):
        return uri[len(PUBLIC_SCHEME) :]
    return uri


def directory_depth(relative_path: str) -> int:
    """Count the separators in a relative path (0 for top-level files)."""
    return relative_path.count("/")


def parent_dir(uri: str) -> str:
    """Get the parent directory URI of a file or directory URI.

    Args:
        uri: Public URI or plain path.

    Returns:
        ``public://`` for top-level entries, ``public://<dir>`` otherwise.
        Plain paths yield their dirname, or an empty string at the top.
    """
    if uri.startswith(PUBLIC_SCHEME):
        directory = posixpath.dirname(to_relative(uri))
        return PUBLIC_SCHEME + directory
    return posixpath.dirname(uri)


def canonicalize_link(link: str) -> str:
    """Map a link found in text content to a canonical URI where possible.

    Query strings and fragments are dropped. Links of the form
    ``/sites/<site>/files/<rest>`` (optionally with a host) become
    ``public://<rest>``. Anything else is returned without its suffix.
    """
    link = re.split(r"[#?]", link, maxsplit=1)[0]
    if link.startswith(PUBLIC_SCHEME):
        return canonicalize(link)
    match = _SITE_FILES_RE.search(link)
    if match:
        return to_uri(match.group(1))
    return link
