"""CLI Utility Functions"""

import os
import shlex
import subprocess
import sys
import tempfile

from commitsplit.output import bold, dim, info, mark_glyph
from commitsplit.git import CommitCandidate
from commitsplit.tree import PathTree

MESSAGE_TEMPLATE_HEADER = (
    "\n"
    "# Write the commit message above. Lines starting with '#' are ignored\n"
    "# and an empty message cancels the commit.\n"
    "#\n"
    "# Files in this commit:\n"
)


def strip_comment_lines(text: str) -> str:
    """Drop '#' comment lines and surrounding blank lines, like git does."""
    lines = [line.rstrip() for line in text.split('\n') if not line.startswith('#')]
    return '\n'.join(lines).strip()


def build_message_template(file_paths: list[str]) -> str:
    return MESSAGE_TEMPLATE_HEADER + ''.join(f"#   {path}\n" for path in file_paths)


def parse_indexes(text: str, count: int) -> list[int]:
    """Parse '1 3 5-7' into zero-based indexes, each within 1..count.

    Repeated entries are kept once, in the order first seen.

    Raises ValueError with a user-facing message on bad input.
    """
    indexes = []
    for token in text.replace(',', ' ').split():
        start, sep, end = token.partition('-')
        try:
            first = int(start)
            last = int(end) if sep else first
        except ValueError:
            raise ValueError(f"Not an entry number: '{token}'")
        if first > last:
            first, last = last, first
        if first < 1 or last > count:
            raise ValueError(f"No entry {token}: choose 1-{count}")
        indexes.extend(range(first - 1, last))
    # Toggling an entry twice would undo it
    return list(dict.fromkeys(indexes))


def format_entry(tree: PathTree, node_id: int, number: int, ascii_only: bool = False) -> str:
    """One listing line: number, checkbox and name, directories with a '/'."""
    node = tree.get_node(node_id)
    name = node.key if node.is_leaf() else bold(f"{node.key}/")
    return f"{info(f'[{number}]')} {mark_glyph(node.mark, ascii_only)} {name}"


def format_candidate(number: int, candidate: CommitCandidate, max_shown: int) -> str:
    """Commit plan entry: the subject line and a collapsed file list."""
    parts = [f"{info(f'[{number}]')} {bold(candidate.subject)}"]

    file_paths = candidate.file_paths
    shown = file_paths[:max_shown]
    for path in shown:
        parts.append(dim(f"    {path}"))
    remaining = len(file_paths) - len(shown)
    if remaining > 0:
        parts.append(dim(f"    ... and {remaining} more files"))
    return '\n'.join(parts)


class EditorError(Exception):
    """Raised when the commit message editor fails."""
    pass


def _resolve_editor(editor: str | None) -> str:
    editor = editor or os.environ.get('VISUAL') or os.environ.get('EDITOR')
    if not editor:
        editor = 'notepad' if sys.platform == 'win32' else 'vi'
    return editor


def edit_message(file_paths: list[str], editor: str | None = None) -> str | None:
    """Open a commit message template in the user's editor.

    Returns the message without comment lines, or None when it is empty.
    Raises EditorError when the editor cannot be started or exits non-zero.
    """
    editor = _resolve_editor(editor)

    tmp = tempfile.NamedTemporaryFile(mode='w', suffix='.gitcommit', delete=False, encoding='utf-8')
    try:
        tmp.write(build_message_template(file_paths))
        tmp.close()
        subprocess.run([*shlex.split(editor), tmp.name], check=True)
        with open(tmp.name, 'r', encoding='utf-8') as f:
            edited = strip_comment_lines(f.read())
        return edited if edited else None
    except subprocess.CalledProcessError as e:
        raise EditorError(f"Editor '{editor}' exited with status {e.returncode}")
    except OSError as e:
        raise EditorError(f"Could not run editor '{editor}': {e}")
    finally:
        try:
            os.unlink(tmp.name)
        except OSError as e:
            # Log to stderr so temp files don't silently accumulate
            print(f"Warning: Could not delete temp file {tmp.name}: {e}", file=sys.stderr)


def confirm(prompt: str, default: bool = True) -> bool:
    """Yes/no question. Ctrl-C or end of input counts as no."""
    suffix = "[Y/n]" if default else "[y/N]"
    try:
        answer = input(f"{prompt} {suffix}: ").strip().lower()
    except (KeyboardInterrupt, EOFError):
        return False
    if not answer:
        return default
    return answer in ('y', 'yes')
