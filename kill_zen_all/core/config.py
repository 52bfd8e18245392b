"""Config file locations, first-run defaults, loading and hot reload."""

import hashlib
import json
import logging
import os
import sys
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from ..exceptions import ConfigParseError, ConfigReadError
from .normalizer import Replacement

logger = logging.getLogger(__name__)

APP_NAME = "kill-zen-all"
REPLACEMENTS_FILE_NAME = "replacements.json"
EXCLUSIONS_FILE_NAME = "exclusions.json"

DEFAULT_REPLACEMENTS = """[
  { "original": "，", "replacement": ", " },
  { "original": "．", "replacement": ". " },
  { "original": "CRLF", "replacement": "。" },
  { "original": "頚", "replacement": "頸" }
]
"""

DEFAULT_EXCLUSIONS = """{
  "exclude": ["　", "！", "？", "〜", "～"]
}
"""

DEFAULT_FILES = {
    REPLACEMENTS_FILE_NAME: DEFAULT_REPLACEMENTS,
    EXCLUSIONS_FILE_NAME: DEFAULT_EXCLUSIONS,
}


class LoadState(Enum):
    """Outcome of the most recent load attempt for one config file"""
    OK = auto()
    FAILED = auto()


@dataclass(frozen=True)
class ConfigSnapshot:
    """Rules and exclusions currently in effect."""
    replacements: Tuple[Replacement, ...] = ()
    exclusions: FrozenSet[str] = frozenset()


def _platform_config_root(environ: Mapping[str, str]) -> Path:
    if sys.platform == "win32":
        appdata = environ.get("APPDATA")
        if appdata:
            return Path(appdata)
        return Path("~/AppData/Roaming").expanduser()
    if sys.platform == "darwin":
        return Path("~/Library/Application Support").expanduser()
    return Path("~/.config").expanduser()


def config_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Resolve the per-user config directory, honouring XDG_CONFIG_HOME."""
    if environ is None:
        environ = os.environ
    xdg = environ.get("XDG_CONFIG_HOME")
    root = Path(xdg) if xdg else _platform_config_root(environ)
    return root / APP_NAME


def create_default_config(directory: Path) -> List[Path]:
    """Write the embedded defaults for any config file that does not exist yet.

    Existing files are left untouched. Returns the paths that were created.
    """
    created = []
    try:
        directory.mkdir(parents=True, exist_ok=True)
        for name, content in DEFAULT_FILES.items():
            path = directory / name
            if path.exists():
                continue
            path.write_text(content, encoding="utf-8")
            logger.info(f"Created default {name.split('.')[0]} file: {path}")
            created.append(path)
    except OSError as e:
        raise ConfigReadError(f"Failed to create default config in {directory}", e) from e
    return created


def _load_json(path: Path):
    try:
        data = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigReadError(f"Failed to read {path}", e) from e
    try:
        return json.loads(data)
    except json.JSONDecodeError as e:
        raise ConfigParseError(f"Failed to parse JSON in {path}", e) from e


def load_replacements(path: Path) -> Tuple[Replacement, ...]:
    """Load an ordered list of {original, replacement} objects."""
    data = _load_json(path)
    if not isinstance(data, list):
        raise ConfigParseError(f"{path}: expected a JSON array of replacements")
    rules = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise ConfigParseError(f"{path}: entry {index} is not an object")
        original = item.get("original")
        replacement = item.get("replacement")
        if not isinstance(original, str) or not isinstance(replacement, str):
            raise ConfigParseError(
                f"{path}: entry {index} needs string 'original' and 'replacement' fields"
            )
        if not original:
            raise ConfigParseError(f"{path}: entry {index} has an empty 'original'")
        rules.append(Replacement(original, replacement))
    return tuple(rules)


def load_exclusions(path: Path) -> FrozenSet[str]:
    """Load the set of characters exempt from width folding."""
    data = _load_json(path)
    if not isinstance(data, dict) or not isinstance(data.get("exclude"), list):
        raise ConfigParseError(f"{path}: expected an object with an 'exclude' array")
    chars = set()
    for index, item in enumerate(data["exclude"]):
        if not isinstance(item, str) or len(item) != 1:
            raise ConfigParseError(f"{path}: exclude[{index}] must be a single character")
        chars.add(item)
    return frozenset(chars)


def _abspath(path) -> Path:
    return Path(os.path.abspath(path))


def _digest(payload) -> str:
    encoded = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


def fingerprint_replacements(rules: Iterable[Replacement]) -> str:
    return _digest([[rule.original, rule.replacement] for rule in rules])


def fingerprint_exclusions(chars: Iterable[str]) -> str:
    return _digest(sorted(chars))


@dataclass
class _ConfigFile:
    """Bookkeeping for one watched config file"""
    path: Path
    label: str
    loader: object
    fingerprint: object
    digest: str = ""
    state: LoadState = LoadState.OK


@dataclass
class ConfigStore:
    """Holds the current config snapshot and reloads it on change."""
    replacements_path: Path
    exclusions_path: Path
    snapshot: ConfigSnapshot = field(default_factory=ConfigSnapshot)
    _files: Dict[Path, _ConfigFile] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self):
        self.replacements_path = _abspath(self.replacements_path)
        self.exclusions_path = _abspath(self.exclusions_path)
        self._files = {
            self.replacements_path: _ConfigFile(
                self.replacements_path, "replacements",
                load_replacements, fingerprint_replacements,
            ),
            self.exclusions_path: _ConfigFile(
                self.exclusions_path, "exclusions",
                load_exclusions, fingerprint_exclusions,
            ),
        }

    @classmethod
    def load(cls, directory: Path) -> "ConfigStore":
        """Load both files from directory; any error here is fatal to the caller."""
        directory = Path(directory)
        store = cls(directory / REPLACEMENTS_FILE_NAME, directory / EXCLUSIONS_FILE_NAME)
        rules = load_replacements(store.replacements_path)
        chars = load_exclusions(store.exclusions_path)
        store.snapshot = ConfigSnapshot(rules, chars)
        store._files[store.replacements_path].digest = fingerprint_replacements(rules)
        store._files[store.exclusions_path].digest = fingerprint_exclusions(chars)
        return store

    @property
    def paths(self) -> Tuple[Path, Path]:
        return self.replacements_path, self.exclusions_path

    def state_of(self, path: Path) -> LoadState:
        return self._files[_abspath(path)].state

    def reload(self, path: Path) -> bool:
        """Reload the config file at path.

        Returns True only when the parsed content differs from the snapshot in
        effect and has replaced it. Load failures are logged once per run of
        consecutive failures and leave the snapshot untouched.
        """
        entry = self._files.get(_abspath(path))
        if entry is None:
            return False
        try:
            value = entry.loader(entry.path)
        except (ConfigReadError, ConfigParseError) as e:
            if entry.state is LoadState.OK:
                logger.warning(f"Failed to load {entry.label}: {e}")
            entry.state = LoadState.FAILED
            return False
        entry.state = LoadState.OK

        digest = entry.fingerprint(value)
        if digest == entry.digest:
            return False
        logger.info(f"{entry.path.name} has been modified.")
        logger.info(f"Reloading {entry.label}...")
        if entry.path == self.replacements_path:
            self.snapshot = ConfigSnapshot(value, self.snapshot.exclusions)
        else:
            self.snapshot = ConfigSnapshot(self.snapshot.replacements, value)
        entry.digest = digest
        return True
