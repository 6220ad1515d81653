"""Git Helper - List changed files and rewrite them as new commits."""

import os
import posixpath
import random
import string
import subprocess
import sys
import tempfile
from dataclasses import dataclass, field
from typing import Optional

from commitsplit.output import dim


@dataclass
class CommitCandidate:
    """One planned commit: a message and the files that go into it."""
    message: str
    file_paths: list[str] = field(default_factory=list)

    @property
    def subject(self) -> str:
        return self.message.split('\n', 1)[0]


class GitError(Exception):
    """Raised when git operations fail."""
    pass


def find_path_conflicts(paths: list[str]) -> list[str]:
    """Paths that are both a file and a directory of another changed file.

    This happens when commits in range delete a file and add a directory of
    the same name. Such a set cannot be shown as one tree.
    """
    path_set = set(paths)
    conflicts = set()
    for path in paths:
        parent = posixpath.dirname(path)
        while parent:
            if parent in path_set:
                conflicts.add(parent)
            parent = posixpath.dirname(parent)
    return sorted(conflicts)


class GitHelper:
    """Runs the git commands behind a split.

    A split checks out a throwaway branch, resets it `depth` commits back
    keeping the changes in the working tree, commits each candidate and
    finally moves the original branch onto the result. Every command runs
    from the repository root so that paths from git can be fed back to it.
    """

    def __init__(self, depth: int = 1, branch_prefix: str = "tmp-branch/", verbose: bool = False):
        self.depth = depth
        self.branch_prefix = branch_prefix
        self.verbose = verbose
        self.repo_root: Optional[str] = None
        self._verify_git_available()
        self._verify_in_repo()
        self.curr_branch_name = self._get_current_branch_name()
        self.orig_head = self._get_head_sha()
        self.temp_branch_name: Optional[str] = None

    def _run_git(self, *args: str) -> str:
        """Run a git command and return stdout."""
        if self.verbose:
            print(dim(f"$ git {' '.join(args)}"), file=sys.stderr)
        try:
            result = subprocess.run(
                ['git', *args],
                capture_output=True,
                text=True,
                check=True,
                encoding='utf-8',
                errors='replace',
                cwd=self.repo_root,
            )
            return result.stdout
        except subprocess.CalledProcessError as e:
            raise GitError(f"Git command failed: git {' '.join(args)}\n{e.stderr}")
        except FileNotFoundError:
            raise GitError("Git is not installed or not in PATH")

    def _verify_git_available(self) -> None:
        """Fail fast if git isn't available."""
        try:
            self._run_git('--version')
        except GitError:
            raise GitError("Git is not installed or not in PATH")

    def _verify_in_repo(self) -> None:
        """Fail fast if we're not in a git repository."""
        try:
            self.repo_root = self._run_git('rev-parse', '--show-toplevel').strip()
        except GitError:
            raise GitError("Not inside a git repository")

    def _get_current_branch_name(self) -> str:
        name = self._run_git('branch', '--show-current').strip()
        if not name:
            raise GitError("HEAD is detached. Check out a branch before splitting.")
        return name

    def _get_head_sha(self) -> str:
        try:
            return self._run_git('rev-parse', '--verify', 'HEAD').strip()
        except GitError:
            raise GitError("The current branch has no commits yet.")

    @property
    def base(self) -> str:
        return f"HEAD~{self.depth}"

    @staticmethod
    def _split_nul(output: str) -> list[str]:
        # -z output: unquoted paths separated by NUL
        return [path for path in output.split('\0') if path]

    def list_changed_files(self) -> list[str]:
        """Files touched by the last `depth` commits, or the working tree for 0."""
        if self.depth == 0:
            files = self._split_nul(self._run_git('diff', '--name-only', '--no-renames', '-z', 'HEAD'))
            untracked = self._split_nul(self._run_git('ls-files', '--others', '--exclude-standard', '-z'))
            files.extend(path for path in untracked if path not in files)
        else:
            if self._run_git('status', '--porcelain', '--untracked-files=no').strip():
                raise GitError(
                    "Working tree has uncommitted changes.\n"
                    "Commit or stash them first, or use --depth 0 to split them instead."
                )
            files = self._split_nul(
                self._run_git('diff', '--name-only', '--no-renames', '-z', self.base, 'HEAD')
            )

        if not files:
            scope = "the working tree" if self.depth == 0 else f"the last {self.depth} commit(s)"
            raise GitError(f"No changed files in {scope}")

        conflicts = find_path_conflicts(files)
        if conflicts:
            raise GitError(
                "Cannot split: these paths are both a file and a directory in range:\n"
                + '\n'.join(f"  {path}" for path in conflicts)
            )
        return files

    def checkout_to_temp_branch(self) -> str:
        rand_key = ''.join(random.choices(string.ascii_letters + string.digits, k=16))
        branch_name = f"{self.branch_prefix}{rand_key}"
        self._run_git('checkout', '-b', branch_name)
        self.temp_branch_name = branch_name
        return branch_name

    def reset(self) -> None:
        """Drop the commits in range, keeping their changes unstaged."""
        target = 'HEAD' if self.depth == 0 else self.base
        self._run_git('reset', '--mixed', target)

    def commit(self, candidates: list[CommitCandidate]) -> list[str]:
        """Stage exactly each candidate's files and commit them. Returns stdout per commit."""
        outputs = []
        for candidate in candidates:
            spec_file = tempfile.NamedTemporaryFile(
                mode='w', suffix='.pathspec', delete=False, encoding='utf-8'
            )
            try:
                spec_file.write('\0'.join(candidate.file_paths))
                spec_file.close()
                self._run_git(
                    '--literal-pathspecs', 'add', '--all',
                    f'--pathspec-from-file={spec_file.name}', '--pathspec-file-nul',
                )
                outputs.append(self._run_git('commit', '-m', candidate.message))
            finally:
                try:
                    os.unlink(spec_file.name)
                except OSError as e:
                    print(f"Warning: Could not delete temp file {spec_file.name}: {e}", file=sys.stderr)
        return outputs

    def restore_branch(self) -> None:
        """Point the original branch at the new commits and drop the temp branch."""
        if self.temp_branch_name is None:
            raise GitError("No temporary branch to restore from")
        self._run_git('checkout', '-B', self.curr_branch_name)
        self._run_git('branch', '-d', self.temp_branch_name)
        self.temp_branch_name = None

    def abort(self) -> None:
        """Undo a split that failed part way.

        Moves the original branch back to the commit it started on with a
        mixed reset, so every change made in the range, including files that
        were untracked, is left in the working tree. Then drops the
        temporary branch.
        """
        if self.temp_branch_name is None:
            raise GitError("No temporary branch to abort")
        # Same commit as HEAD, so this only switches branches
        self._run_git('checkout', '-B', self.curr_branch_name)
        self._run_git('reset', '--mixed', self.orig_head)
        self._run_git('branch', '-D', self.temp_branch_name)
        self.temp_branch_name = None

    def split(self, candidates: list[CommitCandidate]) -> list[str]:
        """Rewrite the range as `candidates`, one commit each, in order."""
        self.checkout_to_temp_branch()
        self.reset()
        outputs = self.commit(candidates)
        self.restore_branch()
        return outputs
