# User configuration and the directories keymui keeps its files in.

import json
import logging
import os

import platformdirs

logger = logging.getLogger(__name__)

APP_NAME = "keymui"
CONFIG_FILE = "config.json"

themes = ("light", "dark", "tokyo-night", "catppuccin-mocha")

# decimal places shown for stats
max_precision = 10

def clamp_precision(n: int) -> int:
    return min(max(n, 0), max_precision)

class Config:

    def __init__(self, metrics_directory: str | None = None,
                 stat_precision: int = 1, use_monospace: bool = True,
                 theme: str = "tokyo-night") -> None:
        self.metrics_directory = metrics_directory
        self.stat_precision = stat_precision
        self.use_monospace = use_monospace
        self.theme = theme

    def to_json(self) -> dict:
        return {
            "metrics_directory": self.metrics_directory,
            "stat_precision": self.stat_precision,
            "use_monospace": self.use_monospace,
            "theme": self.theme,
        }

    @classmethod
    def from_json(cls, data: dict) -> "Config":
        """Missing or mistyped fields fall back to their defaults; unknown
        fields are ignored."""
        config = cls()
        if not isinstance(data, dict):
            raise ValueError("config must be a JSON object")
        directory = data.get("metrics_directory", None)
        if isinstance(directory, str):
            config.metrics_directory = directory
        precision = data.get("stat_precision", None)
        if (isinstance(precision, int) and not isinstance(precision, bool)
                and precision >= 0):
            config.stat_precision = clamp_precision(precision)
        monospace = data.get("use_monospace", None)
        if isinstance(monospace, bool):
            config.use_monospace = monospace
        if data.get("theme", None) in themes:
            config.theme = data["theme"]
        return config

    def save(self, path: str):
        with open(path, "w") as file:
            json.dump(self.to_json(), file)

def load(path: str) -> Config:
    """Raises OSError if the file can't be read and ValueError if it isn't
    a config."""
    with open(path) as file:
        return Config.from_json(json.load(file))

def _home_override() -> str | None:
    return os.environ.get("KEYMUI_HOME") or None

def config_dir() -> str:
    if (home := _home_override()) is not None:
        return os.path.join(home, "config")
    return platformdirs.user_config_dir(APP_NAME)

def data_dir() -> str:
    if (home := _home_override()) is not None:
        return os.path.join(home, "data")
    return platformdirs.user_data_dir(APP_NAME)

def config_path() -> str:
    return os.path.join(config_dir(), CONFIG_FILE)

def initial_setup(data_dir_: str = None):
    if data_dir_ is None:
        data_dir_ = data_dir()
    for sub in ("layouts", "corpora", "metrics"):
        os.makedirs(os.path.join(data_dir_, sub), exist_ok=True)
