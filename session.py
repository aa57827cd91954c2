import logging
import os
import shutil
from typing import Callable, Optional

import command
import completion
import config
import corpus
import layout
from command import (ImportCorpus, Quit, Reload, SelectCorpus, SelectLayout,
                     SelectMetrics, SetMetricsDirectory, SetPrecision,
                     SwapKeys, ViewNotification)

logger = logging.getLogger(__name__)

# (prompt, want_directory) -> path, or None if the user backed out
PathPrompt = Callable[[str, bool], Optional[str]]

def _no_path(prompt: str, directory: bool) -> Optional[str]:
    return None

def scan_dir(path: str) -> dict[str, str]:
    """File stems to paths for every file in `path`, sorted by stem."""
    file_list = {}
    with os.scandir(path) as files:
        for file in files:
            if file.is_file():
                file_list[os.path.splitext(file.name)[0]] = file.path
    return dict(sorted(file_list.items()))

class Session:
    """
    Contains keymui settings, data, and the command line--everything
    needed for commands to be run. The front end only feeds it input and
    draws what it holds.
    """

    def __init__(self, ask_path: PathPrompt = _no_path,
                 data_dir: str = None, config_path: str = None) -> None:
        self.ask_path = ask_path
        self.data_dir = config.data_dir() if data_dir is None else data_dir
        self.config_path = (config.config_path() if config_path is None
                            else config_path)
        config.initial_setup(self.data_dir)
        os.makedirs(os.path.dirname(self.config_path) or ".", exist_ok=True)

        self.notification = ("started", None) # (short, detail)
        self.show_notification = False
        self.running = True

        try:
            self.config = config.load(self.config_path)
        except (OSError, ValueError) as e:
            logger.info("using default config: %s", e)
            self.config = config.Config()

        self.layouts = {} # type: dict[str, layout.Layout]
        self.corpora = {} # type: dict[str, str]
        self.metric_lists = {} # type: dict[str, str]
        self.current_layout = None # type: Optional[str]
        self.current_corpus = None # type: Optional[str]
        self.current_metrics = None # type: Optional[str]
        self.layout = None # type: Optional[layout.Layout]
        self.corpus = None # type: Optional[corpus.Corpus]

        self.rescan()
        self.current_layout = next(iter(self.layouts), None)
        self.current_corpus = next(iter(self.corpora), None)
        self.current_metrics = next(iter(self.metric_lists), None)
        self.load_data()

        self.options = command.input_options()
        self.state = completion.initial_state(self.options)

    # command line

    def registry(self) -> list[command.InputOption]:
        return self.options

    def on_input_changed(self, text: str) -> tuple[str, tuple[int, ...]]:
        self.state = completion.update(self.state, text, self.options)
        return self.state.buffer, self.state.completions

    def on_submit(self):
        """Runs the buffer as a command and applies whatever action it
        produced. Returns the action."""
        self.state, action = command.submit(self.state, self.options, self)
        if action is not None:
            self.apply(action)
        return action

    def suggestions(self) -> list[str]:
        return [self.options[i].display for i in self.state.completions]

    @property
    def buffer(self) -> str:
        return self.state.buffer

    # messages

    def notify(self, msg: str, detail: str = None):
        self.notification = (msg, detail)

    # data

    def _dir(self, sub: str) -> str:
        return os.path.join(self.data_dir, sub)

    def rescan(self):
        self.layouts = layout.scan_layouts(self._dir("layouts"))
        self.corpora = scan_dir(self._dir("corpora"))
        self.metric_lists = scan_dir(self._dir("metrics"))

    def load_data(self):
        """Loads the selected layout and corpus. A selection that fails to
        load is logged and left empty."""
        if self.current_layout in self.layouts:
            self.layout = self.layouts[self.current_layout].copy()
        else:
            logger.info("no layout selected")
            self.layout = None

        self.load_corpus()

    def load_corpus(self):
        self.corpus = None
        if self.current_corpus in self.corpora:
            path = self.corpora[self.current_corpus]
            try:
                self.corpus = corpus.load(path)
            except (OSError, ValueError, KeyError) as e:
                logger.warning("couldn't load corpus %s: %s", path, e)
        else:
            logger.info("no corpus selected")

    def save_config(self):
        try:
            self.config.save(self.config_path)
        except OSError as e:
            logger.warning("couldn't write config file to %s: %s",
                           self.config_path, e)

    def import_metrics(self):
        """Copies every .metrics file from the metrics directory into the
        data directory. Raises ValueError with a user-facing message if
        there is nothing to import."""
        if not self.config.metrics_directory:
            raise ValueError("no metrics directory set")
        added = False
        with os.scandir(self.config.metrics_directory) as files:
            for file in files:
                if not file.is_file() or not file.name.endswith(".metrics"):
                    continue
                shutil.copyfile(file.path, os.path.join(
                    self._dir("metrics"), file.name))
                added = True
        if not added:
            raise ValueError("directory contained no metric files")

    def import_corpus(self, path: str) -> str:
        """Builds a corpus from a text file and saves it to the corpora
        directory. Returns its name."""
        new = corpus.from_file(path)
        stem = os.path.splitext(os.path.basename(path))[0]
        new.save(os.path.join(self._dir("corpora"), stem + ".corpus"))
        return stem

    # actions

    def apply(self, action):
        handler = self.handlers[type(action)]
        handler(self, action)

    def _set_metrics_directory(self, action: SetMetricsDirectory):
        directory = self.ask_path("metrics directory", True)
        if directory:
            self.config.metrics_directory = directory
            self.notify("successfully set metric directory")
            self.save_config()

    def _reload(self, action: Reload):
        try:
            self.import_metrics()
            if not action.quiet:
                self.notify("reloaded successfully")
        except (OSError, ValueError) as e:
            if action.quiet:
                logger.info("metrics not imported: %s", e)
            else:
                self.notify(str(e))
        self.rescan()
        self.load_data()

    def _import_corpus(self, action: ImportCorpus):
        path = self.ask_path("corpus file", False)
        name = None
        if path:
            try:
                name = self.import_corpus(path)
                self.notify("successfully imported corpus")
            except OSError as e:
                logger.warning("couldn't import corpus %s: %s", path, e)
                self.notify("error importing corpus", str(e))
        self.corpora = scan_dir(self._dir("corpora"))
        if name is not None and self.current_corpus not in self.corpora:
            self.current_corpus = name
            self.load_corpus()

    def _view_notification(self, action: ViewNotification):
        self.show_notification = True

    def _swap_keys(self, action: SwapKeys):
        if self.layout is None:
            return
        if self.layout.swap(action.a, action.b):
            logger.info("swapped %s and %s", action.a, action.b)

    def _set_precision(self, action: SetPrecision):
        self.config.stat_precision = config.clamp_precision(action.n)

    def _select_layout(self, action: SelectLayout):
        key = layout.layout_key(action.name)
        if key not in self.layouts:
            self.notify(f"no such layout: {action.name}",
                        "layouts: " + ", ".join(self.layouts))
            return
        self.current_layout = key
        self.load_data()
        self.notify(f"switched to layout {self.layout.name}")

    def _select_corpus(self, action: SelectCorpus):
        if action.name not in self.corpora:
            self.notify(f"no such corpus: {action.name}",
                        "corpora: " + ", ".join(self.corpora))
            return
        self.current_corpus = action.name
        self.load_corpus()
        if self.corpus is None:
            self.notify(f"couldn't load corpus {action.name}")
        else:
            self.notify(f"switched to corpus {action.name}")

    def _select_metrics(self, action: SelectMetrics):
        if action.name not in self.metric_lists:
            self.notify(f"no such metrics list: {action.name}",
                        "metrics: " + ", ".join(self.metric_lists))
            return
        self.current_metrics = action.name
        self.notify(f"switched to metrics {action.name}")

    def _quit(self, action: Quit):
        self.save_config()
        self.running = False

    handlers = {
        SetMetricsDirectory: _set_metrics_directory,
        Reload: _reload,
        ImportCorpus: _import_corpus,
        ViewNotification: _view_notification,
        SwapKeys: _swap_keys,
        SetPrecision: _set_precision,
        SelectLayout: _select_layout,
        SelectCorpus: _select_corpus,
        SelectMetrics: _select_metrics,
        Quit: _quit,
    }
