# Entry point for the keymui application
# Draws the current layout, the notification line, and the command line
# with its suggestions. Everything else happens in the session.

import curses
import curses.textpad
import logging
import os

import config
import gui_util
from session import Session

logger = logging.getLogger(__name__)

backspace_keys = (curses.KEY_BACKSPACE, "\b", "\x7f")
enter_keys = (curses.KEY_ENTER, "\n", "\r")
escape = "\x1b"

def cursor_column(prompt: str, width: int) -> int:
    """Column for the cursor after the prompt, kept on screen even when the
    window is narrower than two columns."""
    return max(0, min(len(prompt), width - 2))

def draw(stdscr: curses.window, s: Session):
    height, width = stdscr.getmaxyx()
    stdscr.erase()

    title = "keymui"
    if s.layout is not None:
        title += f" - {s.layout}"
    if s.current_corpus is not None:
        title += f" - corpus: {s.current_corpus}"
    gui_util.put_line(stdscr, 0, title.ljust(width), curses.A_REVERSE)

    row = 2
    if s.layout is None:
        gui_util.put_line(stdscr, row, "no layout loaded",
                          curses.color_pair(gui_util.red))
        row += 1
    else:
        for line in repr(s.layout).splitlines():
            gui_util.put_line(stdscr, row, "  " + line)
            row += 1

    msg, detail = s.notification
    if s.show_notification:
        row += 1
        for line in gui_util.wrap(
                msg + ("\n" + detail if detail else ""), width - 1):
            gui_util.put_line(stdscr, row, line,
                              curses.color_pair(gui_util.blue))
            row += 1
        gui_util.put_line(stdscr, row, "(esc to close)",
                          curses.color_pair(gui_util.gray))
    else:
        gui_util.put_line(stdscr, height - 3, msg,
                          curses.color_pair(gui_util.blue))

    gui_util.put_line(stdscr, height - 2, "  ".join(s.suggestions()),
                      curses.color_pair(gui_util.gray))
    prompt = "> " + s.buffer
    gui_util.put_line(stdscr, height - 1, prompt)
    stdscr.move(height - 1, cursor_column(prompt, width))
    stdscr.refresh()

def path_prompt(stdscr: curses.window):
    """Asks for a path on the bottom line. An empty answer backs out."""
    def ask_path(prompt: str, directory: bool):
        height, width = stdscr.getmaxyx()
        label = f"{prompt}: "
        gui_util.put_line(stdscr, height - 1, label)
        stdscr.refresh()
        input_win = stdscr.derwin(1, max(width - len(label) - 1, 1),
                                  height - 1, len(label))
        input_win.erase()
        box = curses.textpad.Textbox(input_win, True)
        path = os.path.expanduser(box.edit().strip())
        if not path:
            return None
        if directory and not os.path.isdir(path):
            logger.info("%s is not a directory", path)
            return None
        return path
    return ask_path

def main(stdscr: curses.window):
    gui_util.init_colors()
    curses.curs_set(1)
    s = Session(path_prompt(stdscr))

    while s.running:
        draw(stdscr, s)
        key = stdscr.get_wch()
        if key == curses.KEY_RESIZE:
            continue
        if key == escape:
            s.show_notification = False
        elif key in enter_keys:
            s.on_submit()
        elif key in backspace_keys:
            s.on_input_changed(s.buffer[:-1])
        elif isinstance(key, str) and key.isprintable():
            s.on_input_changed(s.buffer + key)

def run():
    data_dir = config.data_dir()
    os.makedirs(data_dir, exist_ok=True)
    logging.basicConfig(
        filename=os.path.join(data_dir, "keymui.log"),
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s")
    curses.wrapper(main)

if __name__ == "__main__":
    run()
