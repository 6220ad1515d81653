"""CLI Commands"""

import os
import sys

from commitsplit.config import Config, load_config, save_config, get_config_path
from commitsplit.output import bold, dim, info, print_success


def display_config() -> int:
    """Display current configuration."""
    config = load_config()
    config_path = get_config_path()

    print(f"\n{bold('Current Configuration')}\n")

    if config_path:
        print(f"  {dim('Loaded from:')} {config_path}")
    else:
        print(f"  {dim('Loaded from:')} defaults (no .gsplitrc found)")

    env_depth = os.environ.get('GSPLIT_DEPTH')
    if env_depth:
        print(f"  {dim('Environment overrides:')}")
        print(f"    GSPLIT_DEPTH={env_depth}")

    print()
    print(f"  {bold('Settings:')}")
    print(f"    depth:             {info(str(config.depth))}")
    print(f"    branch_prefix:     {info(config.branch_prefix)}")
    print(f"    editor:            {info(config.editor or '$VISUAL / $EDITOR')}")
    print(f"    ascii_glyphs:      {info(str(config.ascii_glyphs).lower())}")
    print(f"    max_file_display:  {info(str(config.max_file_display))}")

    print(f"\n  {dim('Config locations:')}")
    print(f"    Local:  .gsplitrc (current directory, up to the repository root)")
    print(f"    Global: ~/.gsplitrc")
    print(f"\n  {dim('Run')} gsplit --setup {dim('to configure')}\n")

    return 0


def run_setup() -> int:
    """Quick setup wizard."""
    display_config()
    print(f"{bold('Setup Wizard')}\n")

    defaults = Config()

    print(f"How many recent commits to split by default? (Enter for {defaults.depth}, 0 = uncommitted changes): ", end='')
    depth_input = input().strip()
    depth = int(depth_input) if depth_input.isdigit() else defaults.depth

    print(f"\nTemporary branch prefix (Enter for {defaults.branch_prefix}): ", end='')
    branch_prefix = input().strip() or defaults.branch_prefix

    print("\nEditor for commit messages (Enter to use $VISUAL / $EDITOR): ", end='')
    editor = input().strip() or None

    print("\nUse plain ASCII checkboxes [x] [ ] [~]? [y/N]: ", end='')
    ascii_glyphs = input().strip().lower() == 'y'

    config = Config(
        depth=depth,
        branch_prefix=branch_prefix,
        editor=editor,
        ascii_glyphs=ascii_glyphs,
    )
    for warning in config.validate():
        print(dim(f"  {warning}"))
    path = save_config(config, global_config=True)

    print_success(f"Saved to {path}")
    return 0


COMPLETION_SNIPPETS = {
    'bash': ('~/.bashrc', 'eval "$(register-python-argcomplete gsplit)"'),
    'zsh': ('~/.zshrc', 'eval "$(register-python-argcomplete gsplit)"'),
    'fish': ('~/.config/fish/config.fish', 'register-python-argcomplete --shell fish gsplit | source'),
    'powershell': ('$PROFILE', 'register-python-argcomplete --shell powershell gsplit | Out-String | Invoke-Expression'),
}


def _detect_shell() -> str | None:
    shell = os.path.basename(os.environ.get('SHELL', ''))
    if shell in COMPLETION_SNIPPETS:
        return shell
    if sys.platform == 'win32':
        return 'powershell'
    return None


def run_install_completion() -> int:
    """Print the line that enables tab completion for the user's shell."""
    print(f"\n{bold('Tab Completion Setup')}\n")

    shell = _detect_shell()
    if shell:
        rc_file, line = COMPLETION_SNIPPETS[shell]
        print(f"Add this line to {dim(rc_file)}:\n")
        print(f"  {line}\n")
        if shell != 'powershell':
            print(f"Then start a new shell or run: {dim(f'source {rc_file}')}")
    else:
        print("Add the line for your shell to its startup file:\n")
        for name, (rc_file, line) in COMPLETION_SNIPPETS.items():
            print(f"  {dim(f'# {name} ({rc_file})')}")
            print(f"  {line}\n")

    print(f"\n{dim('After setup, press TAB to autocomplete flags.')}")
    return 0
