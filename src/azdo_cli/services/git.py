"""Git command service."""

import re
import subprocess
from dataclasses import dataclass
from pathlib import Path

from azdo_cli.exceptions import (
    DependencyMissingError,
    GitError,
    InvalidURLError,
    NotOnAnyBranchError,
)
from azdo_cli.logging_config import get_logger, log_subprocess_result
from azdo_cli.models.remote import GitRemote
from azdo_cli.utils.git_url import RemoteURL, parse_url

logger = get_logger("azdo_cli.services.git")

RESOLVED_REMOTE_KEY = "azdo-resolved"

_REMOTE_RE = re.compile(r"(.+)\s+(.+)\s+\((push|fetch)\)")


@dataclass
class BranchConfig:
    """The ``branch.<name>.(remote|merge)`` part of git config."""

    remote_name: str = ""
    remote_url: RemoteURL | None = None
    merge_ref: str = ""


def _is_filesystem_path(value: str) -> bool:
    return value == "." or value.startswith(("./", "/"))


def parse_remotes(lines: list[str]) -> list[GitRemote]:
    """Parse ``git remote -v`` output into remotes.

    Lines that do not parse, or whose URL does not parse, are skipped.
    """
    remotes: list[GitRemote] = []
    for line in lines:
        match = _REMOTE_RE.match(line)
        if match is None:
            logger.debug(f"Skipping unparsable remote line: {line!r}")
            continue
        name, url_str, url_type = (part.strip() for part in match.groups())

        try:
            url = parse_url(url_str)
        except InvalidURLError:
            logger.debug(f"Skipping remote {name} with invalid URL {url_str!r}")
            continue

        # `git remote -v` groups the lines of a remote together
        remote = remotes[-1] if remotes and remotes[-1].name == name else None
        if remote is None:
            remote = GitRemote(name=name)
            remotes.append(remote)

        if url_type == "fetch":
            remote.fetch_url = url
        else:
            remote.push_url = url
    return remotes


def populate_resolved_remotes(remotes: list[GitRemote], lines: list[str]) -> None:
    """Apply ``remote.<name>.azdo-resolved <value>`` config lines to remotes."""
    for line in lines:
        key, _, value = line.partition(" ")
        if not value:
            continue
        key_parts = key.split(".", 2)
        if len(key_parts) < 2:
            continue
        name = key_parts[1]
        for remote in remotes:
            if remote.name == name:
                logger.debug(f"Remote {name} is resolved as {value!r}")
                remote.resolved = value
                break


def _output_lines(output: str) -> list[str]:
    return [line for line in output.splitlines() if line]


@dataclass
class GitService:
    """Service for git operations in the current working directory."""

    repo_dir: Path | None = None
    git_path: str = "git"

    def check_dependencies(self) -> list[str]:
        """Check for required dependencies and return list of missing ones."""
        logger.debug("Checking git dependencies")
        missing: list[str] = []

        try:
            result = subprocess.run(
                [self.git_path, "--version"],
                capture_output=True,
                check=True,
                text=True,
            )
            logger.debug(f"git version: {result.stdout.strip()}")
        except (subprocess.CalledProcessError, FileNotFoundError):
            logger.warning("git not found or not working")
            missing.append("git")

        return missing

    def ensure_dependencies(self) -> None:
        """Ensure all required dependencies are installed."""
        missing = self.check_dependencies()
        if missing:
            raise DependencyMissingError(missing)

    def _run(self, *args: str) -> str:
        """Run a git command and return its stdout.

        Raises:
            GitError: If git exits with a non-zero code
            DependencyMissingError: If git is not installed
        """
        cmd = [self.git_path, *args]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                check=True,
                text=True,
                cwd=self.repo_dir,
            )
        except FileNotFoundError as e:
            raise DependencyMissingError(["git"]) from e
        except subprocess.CalledProcessError as e:
            log_subprocess_result(logger, cmd, e.returncode, e.stdout, e.stderr, success=False)
            stderr = (e.stderr or "").strip()
            message = f"failed to run git (exit code {e.returncode})"
            if stderr:
                message = f"{message}: {stderr}"
            raise GitError(message, exit_code=e.returncode, stderr=stderr) from e
        log_subprocess_result(logger, cmd, result.returncode, result.stdout, result.stderr)
        return result.stdout

    def current_branch(self) -> str:
        """Name of the checked-out branch.

        Raises:
            NotOnAnyBranchError: If HEAD is detached
            GitError: If git fails otherwise
        """
        try:
            output = self._run("symbolic-ref", "--quiet", "HEAD")
        except GitError as e:
            if not e.stderr:
                raise NotOnAnyBranchError() from e
            raise
        lines = _output_lines(output)
        branch = lines[0] if lines else ""
        return branch.removeprefix("refs/heads/")

    def read_branch_config(self, branch: str) -> BranchConfig:
        """Read the remote and merge settings of a branch.

        Missing configuration yields an empty BranchConfig.
        """
        config = BranchConfig()
        prefix = re.escape(f"branch.{branch}.")
        try:
            output = self._run("config", "--get-regexp", f"^{prefix}(remote|merge)$")
        except GitError:
            logger.debug(f"No branch config found for {branch}")
            return config

        for line in _output_lines(output):
            key, _, value = line.partition(" ")
            if not value:
                continue
            setting = key.rsplit(".", 1)[-1]
            if setting == "remote":
                if ":" in value:
                    try:
                        config.remote_url = parse_url(value)
                    except InvalidURLError:
                        continue
                elif not _is_filesystem_path(value):
                    config.remote_name = value
            elif setting == "merge":
                config.merge_ref = value
        return config

    def has_local_branch(self, branch: str) -> bool:
        if not branch.startswith("refs/heads/"):
            branch = f"refs/heads/{branch}"
        try:
            self._run("rev-parse", "--verify", branch)
        except GitError:
            return False
        return True

    def has_remote_branch(self, remote: str, branch: str) -> bool:
        ref = f"{remote}/{branch.removeprefix('refs/heads/')}"
        try:
            self._run("rev-parse", "--verify", ref)
        except GitError:
            return False
        return True

    def remotes(self) -> list[GitRemote]:
        """List the configured remotes, including their ``azdo-resolved`` markers."""
        remotes = parse_remotes(_output_lines(self._run("remote", "-v")))

        try:
            resolved = self._run(
                "config", "--get-regexp", rf"^remote\..*\.{RESOLVED_REMOTE_KEY}$"
            )
        except GitError as e:
            # exit code 1 means no remote is resolved
            if e.exit_code != 1:
                raise
            resolved = ""

        populate_resolved_remotes(remotes, _output_lines(resolved))
        logger.debug(f"Found remotes: {[r.name for r in remotes]}")
        return remotes

    def set_remote_resolution(self, name: str, resolution: str) -> None:
        self._run("config", "--add", f"remote.{name}.{RESOLVED_REMOTE_KEY}", resolution)

    def unset_remote_resolution(self, name: str) -> None:
        self._run("config", "--unset-all", f"remote.{name}.{RESOLVED_REMOTE_KEY}")

    def is_local_git_repo(self) -> bool:
        try:
            self._run("rev-parse", "--git-dir")
        except GitError:
            return False
        return True

    def fetch(self, remote: str, refspec: str) -> None:
        logger.info(f"Fetching {refspec} from {remote}")
        self._run("fetch", remote, refspec)

    def checkout_branch(self, branch: str) -> None:
        logger.info(f"Checking out {branch}")
        self._run("checkout", branch)

    def checkout_new_branch(self, remote: str, branch: str) -> None:
        """Create a local branch tracking ``<remote>/<branch>`` and check it out."""
        logger.info(f"Checking out new branch {branch} tracking {remote}/{branch}")
        self._run("checkout", "-b", branch, "--track", f"{remote}/{branch}")
