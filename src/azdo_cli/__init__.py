"""azdo: a command line client for Azure DevOps pull requests and repositories."""

__version__ = "0.1.0"
