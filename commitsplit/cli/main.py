"""CLI Main Entry Point"""

import os
import sys
import time

from commitsplit.config import Config, load_config
from commitsplit.git import CommitCandidate, GitError, GitHelper
from commitsplit.navigator import Navigator, SessionError, SplitSession
from commitsplit.output import success, warning, info, dim, bold, selection_count, print_error, print_success, CHECK, ARROW
from commitsplit.tree import PathTree, TreeError

from commitsplit.cli.args import parse_args
from commitsplit.cli.commands import display_config, run_setup, run_install_completion
from commitsplit.cli.utils import EditorError, confirm, edit_message, format_candidate, format_entry, parse_indexes

HELP_TEXT = """\
  <n> [<n>...]   toggle entries (ranges like 2-5 work too)
  a              toggle everything in this directory
  o <n>          open directory <n>
  .. or u        go up one directory
  c [message]    commit the selection (opens your editor without a message)
  p              show the commits planned so far
  ?              show this help
  q              quit without changing anything"""


def _display_listing(navigator: Navigator, ascii_only: bool = False) -> None:
    """Show the current directory with a checkbox per entry."""
    tree = navigator.tree
    print(f"\n{bold(navigator.breadcrumb)}  {selection_count(tree.num_selected, tree.num_leaf_nodes)}")
    for number, node_id in enumerate(navigator.entries(), 1):
        print(f"  {format_entry(tree, node_id, number, ascii_only)}")


def _display_plan(candidates: list[CommitCandidate], max_shown: int) -> None:
    """Show every planned commit with its files, collapsing long lists."""
    if not candidates:
        print(dim("No commits planned yet."))
        return
    print(bold(f"\nPlanned commits ({len(candidates)}):"))
    for number, candidate in enumerate(candidates, 1):
        print(format_candidate(number, candidate, max_shown))


def _spend_selection(session: SplitSession, inline_message: str, config: Config) -> None:
    """Ask for a message if needed and turn the selection into a commit."""
    if session.tree.num_selected == 0:
        raise SessionError("No files selected")

    message = inline_message
    if not message:
        message = edit_message(session.tree.get_selected_file_paths(), config.editor)
        if message is None:
            print(dim("Empty message, commit cancelled."))
            return

    candidate = session.spend(message)
    print(f"{success(CHECK)} Planned {bold(candidate.subject)} {dim(f'({len(candidate.file_paths)} files)')}")
    if not session.is_done:
        print(dim(f"  {session.remaining_files} files left to assign"))


def _handle_command(session: SplitSession, line: str, config: Config) -> bool:
    """Apply one prompt command. Returns False when the user quits."""
    navigator = session.navigator
    command, _, rest = line.strip().partition(' ')
    rest = rest.strip()

    if command in ('q', 'quit'):
        return False
    if command == '?':
        print(HELP_TEXT)
    elif command == 'p':
        _display_plan(session.candidates, config.max_file_display)
    elif command in ('..', 'u'):
        if not navigator.leave():
            print(dim("Already at the top."))
    elif command == 'a':
        navigator.toggle_all()
    elif command == 'o':
        for index in parse_indexes(rest, len(navigator.entries()))[:1]:
            if not navigator.enter(index):
                print(warning(f"Entry {index + 1} is a file, not a directory."))
    elif command == 'c':
        _spend_selection(session, rest, config)
    elif command[:1].isdigit():
        for index in parse_indexes(line, len(navigator.entries())):
            navigator.toggle(index)
    elif command:
        print(warning(f"Unknown command '{command}'. Type ? for help."))
    return True


def _browse(session: SplitSession, config: Config) -> bool:
    """Prompt loop. Returns True once every file is planned, False on quit."""
    print(dim("Type ? for help."))
    while not session.is_done:
        _display_listing(session.navigator, config.ascii_glyphs)
        try:
            line = input(f"{info('gsplit>')} ")
        except (KeyboardInterrupt, EOFError):
            print()
            return False

        try:
            if not _handle_command(session, line, config):
                return False
        except (ValueError, IndexError, SessionError, TreeError, EditorError) as e:
            print_error(str(e))
    return True


def _abort_split(helper: GitHelper) -> None:
    """Go back to the original branch with every change left in the working tree."""
    temp_branch = helper.temp_branch_name
    try:
        helper.abort()
    except GitError as e:
        print_error(str(e))
        print(dim(f"  Your changes are still on {temp_branch}. To go back without losing them:"))
        print(dim(f"    git checkout -B {helper.curr_branch_name}"))
        print(dim(f"    git reset --mixed {helper.orig_head}"))
        print(dim(f"    git branch -D {temp_branch}"))
        return
    print(dim(f"  Back on {helper.curr_branch_name} at the original commit; all changes are in the working tree."))


def _apply_split(helper: GitHelper, candidates: list[CommitCandidate], verbose: bool) -> int:
    """Rewrite history as the planned commits."""
    t0 = time.time()
    try:
        helper.split(candidates)
    except GitError as e:
        print_error(str(e))
        if helper.temp_branch_name:
            _abort_split(helper)
        return 1

    print_success(f"Split into {len(candidates)} commits on {bold(helper.curr_branch_name)}")
    if verbose:
        print(dim(f"  Timings: split={time.time() - t0:.2f}s"))
    return 0


def _handle_subcommands(args):
    """Handle subcommands that exit early.

    Returns:
        tuple: (exit_code, should_exit) - exit_code if should_exit is True
    """
    if args.install_completion:
        return run_install_completion(), True
    if args.display_config:
        return display_config(), True
    if args.setup:
        return run_setup(), True
    return 0, False


def _get_depth(args, config: Config) -> int:
    """Resolve the split depth from args, env, or config.

    Precedence: CLI args > environment variables > config file
    """
    if args.depth is not None:
        return args.depth
    env_depth = os.environ.get('GSPLIT_DEPTH', '').strip()
    if env_depth:
        if env_depth.isdigit():
            return int(env_depth)
        print(warning(f"Ignoring GSPLIT_DEPTH={env_depth!r}: not a whole number"), file=sys.stderr)
    return config.depth


def _split_flow(args, config: Config, depth: int) -> int:
    """Main split flow.

    Returns:
        int: Exit code
    """
    t0 = time.time()
    try:
        helper = GitHelper(depth=depth, branch_prefix=config.branch_prefix, verbose=args.verbose)
        file_paths = helper.list_changed_files()
        session = SplitSession(PathTree.from_paths(file_paths))
    except (GitError, TreeError) as e:
        print_error(str(e))
        return 1

    scope = "uncommitted changes" if depth == 0 else f"last {depth} commit(s)"
    print(f"Splitting {bold(str(session.total_files))} files from the {scope} on {info(helper.curr_branch_name)}")
    if args.verbose:
        print(dim(f"  Timings: git={time.time() - t0:.2f}s"))

    if not _browse(session, config):
        print(dim("Cancelled. Nothing was changed."))
        return 0

    _display_plan(session.candidates, config.max_file_display)

    if args.dry_run:
        print(f"\n{dim('Dry run: history was not changed.')}")
        return 0

    if not confirm(f"\n{ARROW} Rewrite {helper.curr_branch_name} with these {len(session.candidates)} commits?"):
        print(dim("Cancelled. Nothing was changed."))
        return 0

    return _apply_split(helper, session.candidates, args.verbose)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    args = parse_args(argv)

    # Handle subcommands that exit early
    exit_code, should_exit = _handle_subcommands(args)
    if should_exit:
        return exit_code

    if not sys.stdin.isatty():
        print_error("gsplit is interactive: run it from a terminal")
        return 1

    config = load_config()
    if args.ascii:
        config.ascii_glyphs = True

    return _split_flow(args, config, _get_depth(args, config))
