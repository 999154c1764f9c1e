"""Exception hierarchy for azdo-cli."""


class AzdoError(Exception):
    """Base class for all azdo-cli errors."""


class ValidationError(AzdoError):
    """User input (selector, name, URL) is malformed."""


class InvalidURLError(ValidationError):
    """A git remote URL could not be parsed."""


class InvalidNameError(ValidationError):
    """An organization, project or repository name is malformed."""


class InvalidSelectorError(ValidationError):
    """A pull request selector does not match the selector grammar."""


class NoResultsError(AzdoError):
    """A lookup succeeded but matched nothing.

    Commands render this as a neutral message instead of a failure trace.
    """


class CollaboratorError(AzdoError):
    """An external collaborator (git, REST API) failed."""


class GitError(CollaboratorError):
    """A git subprocess exited with an error."""

    def __init__(self, message: str, exit_code: int = 1, stderr: str = "") -> None:
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(message)


class NotOnAnyBranchError(GitError):
    """HEAD is detached."""

    def __init__(self) -> None:
        super().__init__("git: not on any branch", exit_code=1, stderr="not on any branch")


class AzureDevOpsClientError(CollaboratorError):
    """Exception raised for errors in Azure DevOps client operations."""


class CrossOrganizationMismatchError(AzdoError):
    """The hostname of a remote URL disagrees with the organization's configured host."""

    def __init__(self, url_hostname: str, org_hostname: str, organization: str) -> None:
        self.url_hostname = url_hostname
        self.org_hostname = org_hostname
        self.organization = organization
        super().__init__(
            f"hostname {url_hostname!r} of URL does not match hostname "
            f"{org_hostname!r} of organization {organization!r}"
        )


class ConfigError(AzdoError):
    """Configuration is missing or incomplete."""


class DependencyMissingError(AzdoError):
    """Required external tools are not installed."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Missing required dependencies: {', '.join(missing)}")


def with_context(err: AzdoError, context: str) -> AzdoError:
    """Return a copy of ``err`` whose message is prefixed with ``context``.

    The copy keeps the error's type, so callers can still tell a
    NoResultsError from a GitError after each layer adds its sentence.
    """
    wrapped = err.__class__.__new__(err.__class__)
    wrapped.__dict__.update(err.__dict__)
    wrapped.args = (f"{context}: {err}",)
    return wrapped
