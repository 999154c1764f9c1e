"""Normalization of git remote URLs."""

from dataclasses import dataclass
from urllib.parse import urlsplit

from azdo_cli.exceptions import InvalidURLError

_SUPPORTED_PREFIXES = ("ssh", "git+ssh", "git", "http", "https", "git+https", "git+http")
_POSSIBLE_PREFIXES = (*_SUPPORTED_PREFIXES, "ftp", "ftps", "file")


@dataclass(frozen=True)
class RemoteURL:
    """A parsed, scheme-normalized git remote URL."""

    scheme: str
    host: str
    path: str
    port: int | None = None
    userinfo: str | None = None
    query: str = ""
    fragment: str = ""

    @property
    def hostname(self) -> str:
        return self.host

    def __str__(self) -> str:
        netloc = self.host
        if self.port is not None:
            netloc = f"{netloc}:{self.port}"
        if self.userinfo:
            netloc = f"{self.userinfo}@{netloc}"
        url = f"{self.scheme}://{netloc}{self.path}" if self.scheme else f"{netloc}{self.path}"
        if self.query:
            url = f"{url}?{self.query}"
        if self.fragment:
            url = f"{url}#{self.fragment}"
        return url


def is_supported_protocol(value: str) -> bool:
    """Check whether a URL string or scheme uses a protocol git remotes support."""
    return value.startswith(_SUPPORTED_PREFIXES)


def is_possible_protocol(value: str) -> bool:
    """Like is_supported_protocol, but also accepts ftp(s) and file URLs."""
    return value.startswith(_POSSIBLE_PREFIXES)


def is_url(value: str) -> bool:
    """Check whether a string looks like a git remote URL rather than a name."""
    return value.startswith("git@") or is_supported_protocol(value)


def parse_url(raw_url: str) -> RemoteURL:
    """Normalize a git remote URL.

    Supports scp-like ssh syntax (``git@host:path``), explicit ``ssh://``,
    ``git+ssh://`` and ``git+https://`` schemes.

    Args:
        raw_url: The URL as found in git config

    Returns:
        The canonical RemoteURL

    Raises:
        InvalidURLError: If the URL cannot be parsed
    """
    if raw_url.startswith("git@"):
        # scp-like syntax for ssh
        raw_url = "ssh://" + raw_url

    if raw_url.startswith("ssh://"):
        raw_url = "ssh://" + raw_url[len("ssh://") :].replace(":", "/", 1)
    elif not is_possible_protocol(raw_url) and ":" in raw_url and "\\" not in raw_url:
        # scp-like syntax without user; backslash means a Windows path
        raw_url = "ssh://" + raw_url.replace(":", "/", 1)

    try:
        parts = urlsplit(raw_url)
        port = parts.port
    except ValueError as e:
        raise InvalidURLError(f"invalid git remote URL {raw_url!r}: {e}") from e

    scheme = parts.scheme
    if scheme == "git+ssh":
        scheme = "ssh"
    elif scheme == "git+https":
        scheme = "https"

    netloc = parts.netloc
    userinfo = netloc.rpartition("@")[0] if "@" in netloc else None
    host = parts.hostname or ""
    path = parts.path

    if scheme == "ssh":
        if path.startswith("//"):
            path = path[1:]
        port = None

    return RemoteURL(
        scheme=scheme,
        host=host,
        path=path,
        port=port,
        userinfo=userinfo,
        query=parts.query,
        fragment=parts.fragment,
    )


def normalize_hostname(hostname: str) -> str:
    """Lower-case a hostname and strip a leading ``www.``."""
    return hostname.lower().removeprefix("www.")


def hostname_from_url(url: str) -> str:
    """Normalized hostname of an organization base URL."""
    return normalize_hostname(urlsplit(url).hostname or "")
