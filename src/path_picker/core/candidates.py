"""Filesystem-driven candidate generation for partial paths."""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Callable, Iterator

from path_picker.core.environment import Environment
from path_picker.core.models import Candidate, CandidateKind, CompletionKind

logger = logging.getLogger(__name__)


def _basename(path: str) -> str:
    return os.path.basename(path.rstrip(os.sep)) or path


def _parent(path: str) -> str:
    """Parent directory, ignoring a trailing separator ("/a/b/" -> "/a")."""
    stripped = path.rstrip(os.sep)
    if not stripped:
        return os.sep
    return os.path.dirname(stripped) or os.curdir


def _accessible(path: str) -> bool:
    try:
        return os.access(path, os.F_OK)
    except ValueError:
        return False


def resolve_input(raw_path: str, env: Environment) -> str | None:
    """Anchor *raw_path* on the environment's base directory.

    Absolute input is returned untouched so that a candidate label can
    equal what the user typed. Returns None when no base directory exists.
    """
    base = env.base_dir()
    if not base:
        return None
    if os.path.isabs(raw_path):
        return raw_path
    return os.path.normpath(os.path.join(base, raw_path))


def path_candidates(
    raw_path: str,
    kind: CompletionKind = CompletionKind.ALL,
    env: Environment | None = None,
) -> Iterator[Candidate]:
    """Yield completion candidates for *raw_path*.

    The resolved path itself comes first (as a directory, file, or
    create suggestion), followed by the entries of the directory it lives
    in, in the order the OS enumerates them. Filesystem errors never
    propagate: they only cut the output short.
    """
    env = env or Environment()
    path = resolve_input(raw_path, env)
    if path is None:
        return

    try:
        st = os.stat(path)
    except (OSError, ValueError) as e:
        logger.debug("stat failed for %s: %s", path, e)
        if kind.allows_files:
            yield Candidate(
                label=path,
                detail=f"Create/Rename to: {_basename(path)}",
                kind=CandidateKind.CREATE,
            )
        dirname = _parent(path)
        if not _accessible(dirname):
            return
    else:
        if stat.S_ISDIR(st.st_mode):
            dirname = path
            if kind.allows_directories:
                yield Candidate(
                    label=path,
                    detail=f"Target directory: {_basename(path)}/",
                    kind=CandidateKind.DIRECTORY,
                )
        else:
            if kind.allows_files:
                yield Candidate(
                    label=path,
                    detail=f"Target file: {_basename(path)}",
                    kind=CandidateKind.FILE,
                )
            dirname = _parent(path)

    try:
        with os.scandir(dirname) as entries:
            for entry in entries:
                try:
                    is_dir = stat.S_ISDIR(entry.stat().st_mode)
                except OSError as e:
                    logger.debug("skipping %s: %s", entry.path, e)
                    continue
                fullpath = os.path.join(dirname, entry.name)
                if is_dir:
                    if kind.allows_directories:
                        yield Candidate(
                            label=fullpath,
                            detail=f"Open {entry.name}/",
                            kind=CandidateKind.DIRECTORY,
                        )
                elif kind.allows_files:
                    yield Candidate(
                        label=fullpath,
                        detail=f"Open {entry.name}",
                        kind=CandidateKind.FILE,
                    )
    except (OSError, ValueError) as e:
        logger.debug("cannot list %s: %s", dirname, e)


class CandidateSequence:
    """Restartable view over path_candidates().

    Each iteration probes the filesystem again; nothing is cached.
    """

    def __init__(
        self,
        raw_path: str,
        kind: CompletionKind = CompletionKind.ALL,
        env: Environment | None = None,
    ):
        self.raw_path = raw_path
        self.kind = kind
        self.env = env or Environment()

    def __iter__(self) -> Iterator[Candidate]:
        return path_candidates(self.raw_path, self.kind, self.env)

    def __repr__(self) -> str:
        return f"CandidateSequence({self.raw_path!r}, {self.kind.value!r})"


def path_completion(
    kind: CompletionKind = CompletionKind.ALL,
    env: Environment | None = None,
) -> Callable[[str], CandidateSequence]:
    """Build a completion function for autocompleted_input()."""
    env = env or Environment()

    def completion(value: str) -> CandidateSequence:
        return CandidateSequence(value, kind, env)

    return completion
