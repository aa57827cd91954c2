# Live autocompletion for the command line.
# The state is passed in and returned; nothing here is stored globally.

from typing import NamedTuple, Sequence

from matcher import is_prefix, longest_common_prefix_length

class CompletionState(NamedTuple):
    buffer: str
    completions: tuple[int, ...] # indices into the input options

def recompute(buffer: str, options: Sequence) -> tuple[int, ...]:
    """Indices of every option whose display string starts with `buffer`,
    in option order."""
    return tuple(i for i, option in enumerate(options)
                 if is_prefix(buffer, option.display))

def initial_state(options: Sequence) -> CompletionState:
    return CompletionState("", recompute("", options))

def should_expand(state: CompletionState, new_text: str) -> bool:
    """The user typed whitespace while something was still matching."""
    return bool(state.completions) and new_text[-1:].isspace()

def expand(completions: Sequence[int], options: Sequence) -> str:
    """Text to replace the buffer with when the user accepts a suggestion.

    If exactly one priority command is among the matches, it wins outright.
    Otherwise the buffer becomes the longest common prefix of the matches.
    A trailing space moves the user on to the arguments once the command
    is unambiguous.
    """
    matched = [options[i] for i in completions]
    priority = []
    for option in matched:
        if option.command.priority and option.command not in priority:
            priority.append(option.command)

    if len(priority) == 1:
        completed = priority[0].names[0]
    else:
        displays = [option.display for option in matched]
        completed = displays[0][:longest_common_prefix_length(displays)]

    if len(matched) == 1 or len(priority) == 1:
        completed += " "
    return completed

def update(state: CompletionState, new_text: str,
           options: Sequence) -> CompletionState:
    if should_expand(state, new_text):
        buffer = expand(state.completions, options)
    else:
        buffer = new_text
    return CompletionState(buffer, recompute(buffer, options))
