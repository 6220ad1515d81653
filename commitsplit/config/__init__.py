"""Configuration Management Package"""

import json
import sys
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

from commitsplit import DEFAULT_DEPTH


@dataclass
class Config:
    """User configuration with sensible defaults."""
    depth: int = DEFAULT_DEPTH
    branch_prefix: str = "tmp-branch/"
    editor: Optional[str] = None
    ascii_glyphs: bool = False
    max_file_display: int = 8  # Files listed per commit in the plan before collapsing

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}

    def validate(self) -> list[str]:
        """Validate config values and return list of warnings.

        Invalid values are replaced with defaults silently after warning.
        """
        warnings = []
        defaults = Config()

        if not isinstance(self.depth, int) or isinstance(self.depth, bool) or self.depth < 0:
            warnings.append(f"Invalid depth '{self.depth}', using {defaults.depth}")
            self.depth = defaults.depth

        if not isinstance(self.branch_prefix, str) or not self.branch_prefix.strip() or ' ' in self.branch_prefix:
            warnings.append(f"Invalid branch_prefix '{self.branch_prefix}', using '{defaults.branch_prefix}'")
            self.branch_prefix = defaults.branch_prefix

        if self.editor is not None and (not isinstance(self.editor, str) or not self.editor.strip()):
            warnings.append(f"Invalid editor '{self.editor}', using $VISUAL/$EDITOR")
            self.editor = defaults.editor

        if not isinstance(self.ascii_glyphs, bool):
            warnings.append(f"Invalid ascii_glyphs '{self.ascii_glyphs}', using {str(defaults.ascii_glyphs).lower()}")
            self.ascii_glyphs = defaults.ascii_glyphs

        if not isinstance(self.max_file_display, int) or self.max_file_display <= 0:
            warnings.append(f"Invalid max_file_display '{self.max_file_display}', using {defaults.max_file_display}")
            self.max_file_display = defaults.max_file_display

        return warnings

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        config = cls(**filtered)
        # Validate and print warnings to stderr
        for warning in config.validate():
            print(f"Config warning: {warning}", file=sys.stderr)
        return config


class ConfigManager:
    """Finds, loads and saves .gsplitrc files.

    The first file found wins, searching the start directory and its parents
    up to the repository root (the first directory containing .git), then the
    home directory. Outside a repository only the start directory is searched
    before home.
    """

    CONFIG_FILENAME = ".gsplitrc"

    def __init__(self, start_dir: Optional[Path] = None):
        self._start_dir = start_dir
        self._config: Optional[Config] = None
        self._config_path: Optional[Path] = None

    def candidate_paths(self) -> list[Path]:
        start = self._start_dir or Path.cwd()
        paths = []
        for directory in (start, *start.parents):
            paths.append(directory / self.CONFIG_FILENAME)
            if (directory / '.git').exists():
                break
        else:
            paths = paths[:1]

        home_path = Path.home() / self.CONFIG_FILENAME
        if home_path not in paths:
            paths.append(home_path)
        return paths

    def load(self) -> Config:
        if self._config is not None:
            return self._config

        for path in self.candidate_paths():
            if path.is_file():
                self._config = self._load_from_file(path)
                self._config_path = path
                return self._config

        self._config = Config()
        return self._config

    def _load_from_file(self, path: Path) -> Config:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("expected a JSON object")
            return Config.from_dict(data)
        except (json.JSONDecodeError, ValueError, OSError) as e:
            print(f"Warning: Could not load {path}: {e}", file=sys.stderr)
            return Config()

    def save(self, config: Config, global_config: bool = True) -> Path:
        """Write the config to ~/.gsplitrc, or to the start directory."""
        directory = Path.home() if global_config else (self._start_dir or Path.cwd())
        path = directory / self.CONFIG_FILENAME
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(config.to_dict(), f, indent=2)
            f.write('\n')
        # Keep the cache in step with the file
        self._config = config
        self._config_path = path
        return path

    def get_config_path(self) -> Optional[Path]:
        return self._config_path


_manager = ConfigManager()


def load_config() -> Config:
    return _manager.load()


def save_config(config: Config, global_config: bool = True) -> Path:
    return _manager.save(config, global_config)


def get_config_path() -> Optional[Path]:
    return _manager.get_config_path()


__all__ = [
    "Config",
    "ConfigManager",
    "load_config",
    "save_config",
    "get_config_path",
]
