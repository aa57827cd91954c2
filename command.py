# `Command`s bundle names/aliases, argument kinds, help-strings, and
# functionality. Also defines all the individual commands in keymui, and
# the interpreter that turns a submitted command line into an action.

from __future__ import annotations

import enum
import logging
import os
from typing import TYPE_CHECKING, Any, Callable, NamedTuple, Sequence

import completion
from completion import CompletionState
import config
import layout

if TYPE_CHECKING:
    from session import Session

logger = logging.getLogger(__name__)

class ArgKind(enum.Enum):
    KEY = enum.auto()
    NATURAL_NUMBER = enum.auto()
    FREE_TEXT = enum.auto()

class Command:

    def __init__(self, names: tuple[str, ...], args: tuple[ArgKind, ...],
                 help: str, fn: Callable[[list, Session], Any],
                 priority: bool = False, required: int = None):
        """
        `names` is a list of aliases that the user can use to activate the
        command. The first is the canonical name, which is what completion
        expands to.

        `args` are the argument slots in order. Only the first `required`
        of them must be present (defaults to all).

        `priority` makes this command win completion whenever it is the
        only priority command still matching. This is for commands whose
        arguments look like the names of other commands, such as `swap`,
        whose arguments are single keys.

        `fn` receives the converted arguments and the session. It returns
        the action to apply, or None.
        """
        self.names = names
        self.args = args
        self.help = help
        self.fn = fn
        self.priority = priority
        self.required = len(args) if required is None else required

    def __repr__(self) -> str:
        return f"Command({self.names[0]!r})"

class InputOption(NamedTuple):
    command: Command
    display: str

commands = list() # type: list[Command]
by_name = dict() # type: dict[str, Command]

def register_command(cmd: Command):
    commands.append(cmd)
    for name in cmd.names:
        by_name[name] = cmd

def input_options(commands_: Sequence[Command] = None) -> list[InputOption]:
    if commands_ is None:
        commands_ = commands
    return [InputOption(cmd, name) for cmd in commands_ for name in cmd.names]

# Actions for the session to apply

class SetMetricsDirectory(NamedTuple):
    pass

class Reload(NamedTuple):
    quiet: bool = False # keep the current notification

class ImportCorpus(NamedTuple):
    pass

class ViewNotification(NamedTuple):
    pass

class SwapKeys(NamedTuple):
    a: str
    b: str

class SetPrecision(NamedTuple):
    n: int

class Quit(NamedTuple):
    pass

class SelectLayout(NamedTuple):
    name: str

class SelectCorpus(NamedTuple):
    name: str

class SelectMetrics(NamedTuple):
    name: str

# Interpreter

def tokenize(buffer: str) -> list[str]:
    return buffer.split()

def resolve(token: str, table: dict[str, Command] = None) -> Command | None:
    """Exact name lookup. Partial names never resolve."""
    if table is None:
        table = by_name
    return table.get(token, None)

def convert_arg(kind: ArgKind, token: str):
    """The converted value, or None if the token doesn't fit the kind."""
    if kind == ArgKind.KEY:
        return token[0] if token else None
    elif kind == ArgKind.NATURAL_NUMBER:
        if not token.isdecimal():
            return None
        try:
            return int(token)
        except ValueError:
            return None
    else:
        return token

def convert_args(cmd: Command, tokens: Sequence[str]) -> list | None:
    """Converts the tokens for each argument slot. Tokens beyond the last
    slot are dropped. Returns None if any given token fails to convert or
    fewer than `cmd.required` arguments remain."""
    converted = []
    for kind, token in zip(cmd.args, tokens):
        value = convert_arg(kind, token)
        if value is None:
            return None
        converted.append(value)
    if len(converted) < cmd.required:
        return None
    return converted

def interpret(buffer: str, s: Session,
              table: dict[str, Command] = None) -> tuple[bool, Any]:
    """Runs one command line. Returns (resolved, action): whether the
    first token named a command, and the action it produced (or None).
    Never raises on user text."""
    tokens = tokenize(buffer)
    if not tokens:
        return False, None
    cmd = resolve(tokens[0], table)
    if cmd is None:
        logger.debug("unrecognized command %r", tokens[0])
        return False, None
    args = convert_args(cmd, tokens[1:])
    if args is None:
        logger.debug("bad arguments for %s: %r", cmd.names[0], tokens[1:])
        return True, None
    logger.info("running %s %r", cmd.names[0], args)
    return True, cmd.fn(args, s)

def submit(state: CompletionState, options: Sequence[InputOption],
           s: Session, table: dict[str, Command] = None
           ) -> tuple[CompletionState, Any]:
    """Interprets the buffer. Once the command name resolves, the buffer
    is cleared whether or not the arguments were usable."""
    resolved, action = interpret(state.buffer, s, table)
    if resolved:
        state = completion.initial_state(options)
    return state, action

# Actual commands

def cmd_set_metrics_directory(args: list, s: Session):
    return SetMetricsDirectory()

register_command(Command(
    ("set-metrics-directory",), (),
    "set-metrics-directory: Choose the directory to import metrics from",
    cmd_set_metrics_directory
))

def cmd_reload(args: list, s: Session):
    return Reload()

register_command(Command(
    ("reload",), (),
    "reload: Import metrics and rescan layouts and corpora",
    cmd_reload
))

def cmd_import_corpus(args: list, s: Session):
    return ImportCorpus()

register_command(Command(
    ("import-corpus",), (),
    "import-corpus: Build a corpus from a text file",
    cmd_import_corpus
))

def cmd_view_notification(args: list, s: Session):
    return ViewNotification()

register_command(Command(
    ("view-notification",), (),
    "view-notification: Show the full last notification",
    cmd_view_notification
))

def cmd_swap(args: list, s: Session):
    return SwapKeys(args[0], args[1])

register_command(Command(
    ("swap",), (ArgKind.KEY, ArgKind.KEY),
    "swap <key> <key>: Swap two keys on the current layout",
    cmd_swap,
    priority=True
))

def cmd_precision(args: list, s: Session):
    return SetPrecision(args[0])

register_command(Command(
    ("precision",), (ArgKind.NATURAL_NUMBER,),
    "precision <n>: Show stats with n decimal places",
    cmd_precision
))

def cmd_ngram_frequency(args: list, s: Session):
    if s.corpus is None:
        s.notify("no corpus loaded")
        return None
    corpus_total = s.corpus.total_chars()
    totals = [0, 0]
    for ngram in args:
        count, skip_count = s.corpus.ngram_counts(ngram)
        totals[0] += count
        totals[1] += skip_count
    if corpus_total:
        percents = [100*t/corpus_total for t in totals]
    else:
        percents = [0.0, 0.0]
    p = config.clamp_precision(s.config.stat_precision)
    s.notify(f"total: ({percents[0]:.{p}f}%, {percents[1]:.{p}f}%)")
    return None

register_command(Command(
    ("ngram-frequency",), (ArgKind.FREE_TEXT, ArgKind.FREE_TEXT),
    "ngram-frequency <ngram> [ngram]: Combined frequency of up to two "
        "ngrams, and of the pair as a skipgram",
    cmd_ngram_frequency,
    required=1
))

def valid_layout_name(name: str) -> bool:
    """Names become file names in the layouts directory, so they may not
    reach outside it."""
    if ".." in name or os.sep in name:
        return False
    return not (os.altsep and os.altsep in name)

def cmd_save_layout(args: list, s: Session):
    if s.layout is None:
        s.notify("no layout loaded")
        return None
    if (not args or not valid_layout_name(args[0])
            or any(l.name.lower() == args[0].lower()
                   for l in s.layouts.values())):
        s.notify("Layout name must be provided and different from an "
                 "existing layout")
        return None
    name = args[0]
    path = os.path.join(s.data_dir, "layouts", f"{name.lower()}.json")
    try:
        s.layout.renamed(name, ["User"]).save(path)
    except OSError as e:
        logger.exception("couldn't save layout to %s", path)
        s.notify("error saving layout", str(e))
        return None
    logger.info("saved layout to %s", path)
    s.notify(f"saved layout {name}", path)
    s.current_layout = layout.layout_key(name)
    return Reload(quiet=True)

register_command(Command(
    ("save-layout",), (ArgKind.FREE_TEXT,),
    "save-layout <name>: Save the current layout under a new name",
    cmd_save_layout,
    required=0
))

def cmd_layout(args: list, s: Session):
    return SelectLayout(args[0])

register_command(Command(
    ("layout",), (ArgKind.FREE_TEXT,),
    "layout <name>: Switch to another layout, dropping unsaved swaps",
    cmd_layout
))

def cmd_corpus(args: list, s: Session):
    return SelectCorpus(args[0])

register_command(Command(
    ("corpus",), (ArgKind.FREE_TEXT,),
    "corpus <name>: Switch to another imported corpus",
    cmd_corpus
))

def cmd_metrics(args: list, s: Session):
    return SelectMetrics(args[0])

register_command(Command(
    ("metrics",), (ArgKind.FREE_TEXT,),
    "metrics <name>: Switch to another imported metrics list",
    cmd_metrics
))

def cmd_help(args: list, s: Session):
    if not args:
        s.notify("commands: " + ", ".join(cmd.names[0] for cmd in commands),
                 "\n".join(cmd.help for cmd in commands))
        return None
    cmd = resolve(args[0])
    if cmd is None:
        s.notify(f"no such command: {args[0]}")
        return None
    text = cmd.help
    if len(cmd.names) > 1:
        text += f"\nAliases: {', '.join(cmd.names)}"
    s.notify(cmd.help, text)
    return None

register_command(Command(
    ("help", "h"), (ArgKind.FREE_TEXT,),
    "h[elp] [command]: List commands or explain one",
    cmd_help,
    required=0
))

def cmd_quit(args: list, s: Session):
    return Quit()

register_command(Command(
    ("quit", "exit"), (),
    "quit|exit: Save settings and leave keymui",
    cmd_quit
))
