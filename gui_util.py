import curses

red = 1
green = 2
blue = 3
gray = 4

def init_colors():
    curses.start_color()
    curses.use_default_colors()
    bg = -1
    curses.init_pair(red, curses.COLOR_RED, bg)
    curses.init_pair(green, curses.COLOR_GREEN, bg)
    curses.init_pair(blue, curses.COLOR_CYAN, bg)
    curses.init_pair(gray, 244 if curses.COLORS > 244 else curses.COLOR_WHITE,
                     bg)

def wrap(text: str, width: int) -> list[str]:
    """Splits on newlines, then hard-wraps each line to `width`."""
    lines = []
    width = max(width, 1)
    for line in text.split("\n"):
        while len(line) > width:
            lines.append(line[:width])
            line = line[width:]
        lines.append(line)
    return lines

def put_line(win: curses.window, y: int, text: str, attr: int = 0):
    """Overwrites row `y` with `text`, cut to the window width. Rows
    outside the window are ignored. Does not refresh the window."""
    ymax, xmax = win.getmaxyx()
    if not 0 <= y < ymax:
        return
    win.move(y, 0)
    win.clrtoeol()
    # the bottom-right cell can't be written without an error
    width = xmax - 1 if y == ymax - 1 else xmax
    if width > 0:
        win.addnstr(y, 0, text, width, attr)
