# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Source acquisition: clone a repository and pin it to a revision.

Each call gets a brand new temporary directory, so two runs never share a
clone. We clone full history because the revision can be any commit, not
just the tip of the default branch.

Directories are NOT removed here, not even when the checkout fails. The
pipeline decides what happens to them (see BenchmarkProjectPipeline).
"""

import subprocess
import tempfile
from pathlib import Path
from typing import Optional

from benchprep.logging.logger import get_logger
from benchprep.pipeline.errors import CheckoutError, CloneError
from benchprep.pipeline.models import WorkingTree
from benchprep.utils.paths import ensure_directory, is_local_path

logger = get_logger(__name__)

GITHUB_URL_TEMPLATE = "https://github.com/{}"


def resolve_clone_url(locator: str) -> str:
    """
    Turn a repository locator into something `git clone` accepts.

    `owner/name` is GitHub shorthand. URLs, scp-style `git@host:path`
    addresses and directories that exist locally pass through untouched.
    """
    locator = locator.strip()
    if not locator:
        raise CloneError("Repository locator is empty")
    if "://" in locator or locator.startswith("git@") or is_local_path(locator):
        return locator
    parts = locator.split("/")
    if len(parts) == 2 and all(parts):
        return GITHUB_URL_TEMPLATE.format(locator)
    raise CloneError(f"Unrecognized repository locator: {locator!r}")


def _stderr_tail(text: Optional[str], limit: int = 2000) -> str:
    if not text:
        return ""
    text = text.strip()
    return text[-limit:]


class SourceAcquirer:
    """Clones repositories with the git CLI."""

    def __init__(
        self,
        git_executable: str = "git",
        timeout_seconds: Optional[int] = None,
        base_dir: Optional[Path] = None,
    ) -> None:
        self._git = git_executable
        self._timeout_seconds = timeout_seconds
        self._base_dir = base_dir

    def _new_directory(self) -> Path:
        parent = None
        try:
            if self._base_dir is not None:
                parent = str(ensure_directory(self._base_dir))
            return Path(tempfile.mkdtemp(prefix="benchprep_", dir=parent))
        except OSError as err:
            raise CloneError(f"Cannot create a directory to clone into: {err}") from err

    def acquire(self, repository: str, revision: str) -> WorkingTree:
        """
        Clone `repository` and check out `revision`.

        Raises:
            CloneError: bad locator, unreachable remote, git missing, clone timed out.
            CheckoutError: the revision isn't in the cloned history.
        """
        url = resolve_clone_url(repository)
        target = self._new_directory()

        logger.info(
            "Cloning repository",
            extra={"repository": repository, "url": url, "revision": revision, "path": str(target)},
        )
        try:
            self._clone(url, target)
            self._checkout(target, revision)
        except (CloneError, CheckoutError) as err:
            err.path = target
            raise

        logger.info(
            "Repository pinned",
            extra={"repository": repository, "revision": revision, "path": str(target)},
        )
        return WorkingTree(root=target, repository=repository, revision=revision)

    def _clone(self, url: str, target: Path) -> None:
        try:
            subprocess.run(
                [self._git, "clone", "--quiet", url, str(target)],
                check=True,
                capture_output=True,
                text=True,
                timeout=self._timeout_seconds,
            )
        except FileNotFoundError as err:
            raise CloneError(f"git executable not found: {self._git}") from err
        except subprocess.CalledProcessError as err:
            raise CloneError(
                f"git clone failed for {url} (exit {err.returncode}): {_stderr_tail(err.stderr)}"
            ) from err
        except subprocess.TimeoutExpired as err:
            raise CloneError(
                f"git clone timed out for {url} after {self._timeout_seconds} seconds"
            ) from err

    def _checkout(self, target: Path, revision: str) -> None:
        if not revision or revision.startswith("-"):
            raise CheckoutError(f"Invalid revision: {revision!r}")
        try:
            subprocess.run(
                [self._git, "checkout", "--quiet", revision],
                check=True,
                capture_output=True,
                text=True,
                timeout=self._timeout_seconds,
                cwd=str(target),
            )
        except FileNotFoundError as err:
            raise CheckoutError(f"git executable not found: {self._git}") from err
        except subprocess.CalledProcessError as err:
            raise CheckoutError(
                f"Revision {revision!r} could not be checked out: {_stderr_tail(err.stderr)}"
            ) from err
        except subprocess.TimeoutExpired as err:
            raise CheckoutError(
                f"git checkout of {revision!r} timed out after {self._timeout_seconds} seconds"
            ) from err
