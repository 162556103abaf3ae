"""Exceptions raised by the git layer."""


class GitError(Exception):
    """A git command failed or the repository could not be read."""

    pass


class GitNotFoundError(GitError):
    """The git executable is not available on PATH."""

    pass


class NoStagedChangesError(GitError):
    """Committing was requested while the index is empty."""

    pass
