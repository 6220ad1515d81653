"""CLI Argument Parsing"""

import argparse
import argcomplete

from commitsplit import __version__


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a whole number, got '{value}'")
    if number < 0:
        raise argparse.ArgumentTypeError("depth cannot be negative")
    return number


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='gsplit',
        description='Split recent commits into smaller, grouped commits',
        epilog='Example: gsplit -n 3 (regroup the files of the last 3 commits)'
    )

    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {__version__}')

    # Split options
    parser.add_argument('-n', '--depth', type=_non_negative_int, metavar='N', help='Number of commits to split (0 = uncommitted changes)')
    parser.add_argument('--dry-run', action='store_true', help='Plan the commits and print them, but do not rewrite history')

    # Output options
    parser.add_argument('--ascii', action='store_true', help='Use [x] [ ] [~] instead of Unicode checkboxes')
    parser.add_argument('--verbose', action='store_true', help='Show the git commands being run and timings')

    # Setup/config
    parser.add_argument('--setup', action='store_true', help='Configure defaults')
    parser.add_argument('--display-config', action='store_true', help='Show current configuration')
    parser.add_argument('--install-completion', action='store_true', help='Install shell tab completion')

    argcomplete.autocomplete(parser)
    return parser.parse_args(argv)
