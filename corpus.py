# Load and process a corpus into frequency tables.
# Members:
    # char_list: list of character groups, each group counted as one key
    # chars: counts per char index
    # bigrams, skipgrams: flat n*n tables, see bigram_idx
    # trigrams: flat n*n*n table, see trigram_idx
# Index 0 collects every character that isn't in the char list.

from typing import Dict, Iterable, Sequence

import numpy as np

default_lower = """`1234567890-=qwertyuiop[]\\asdfghjkl;'zxcvbnm,./"""
default_upper = """~!@#$%^&*()_+QWERTYUIOP{}|ASDFGHJKL:"ZXCVBNM<>?"""

def default_char_list() -> list[list[str]]:
    """Letters with their capitals, space, then each unshifted symbol
    with its shifted counterpart."""
    char_list = [[c, c.upper()] for c in "abcdefghijklmnopqrstuvwxyz"]
    char_list.append([" "])
    for l, u in zip(default_lower, default_upper):
        if l.isalpha():
            continue
        char_list.append([l, u])
    return char_list

class Corpus:

    def __init__(self, char_list: Sequence[Sequence[str]] = None) -> None:
        if char_list is None:
            char_list = default_char_list()
        self.char_list = [list(group) for group in char_list]
        self.char_map = {} # type: Dict[str, int]
        for i, group in enumerate(self.char_list, start=1):
            for c in group:
                self.char_map[c] = i
        n = len(self.char_list) + 1
        self.size = n
        self.chars = np.zeros(n, dtype=np.uint64)
        self.bigrams = np.zeros(n*n, dtype=np.uint64)
        self.skipgrams = np.zeros(n*n, dtype=np.uint64)
        self.trigrams = np.zeros(n*n*n, dtype=np.uint64)

    def corpus_char(self, c: str) -> int:
        return self.char_map.get(c, 0)

    def uncorpus_char(self, i: int) -> str:
        if i <= 0 or i > len(self.char_list):
            return ""
        return self.char_list[i-1][0]

    def bigram_idx(self, a: int, b: int) -> int:
        return a*self.size + b

    def trigram_idx(self, a: int, b: int, c: int) -> int:
        return (a*self.size + b)*self.size + c

    def add_text(self, text: str):
        line = np.fromiter(
            (self.corpus_char(c) for c in text), dtype=np.int64,
            count=len(text))
        if not len(line):
            return
        n = self.size
        self.chars += np.bincount(line, minlength=n).astype(np.uint64)
        if len(line) >= 2:
            self.bigrams += np.bincount(
                line[:-1]*n + line[1:], minlength=n*n).astype(np.uint64)
        if len(line) >= 3:
            self.skipgrams += np.bincount(
                line[:-2]*n + line[2:], minlength=n*n).astype(np.uint64)
            self.trigrams += np.bincount(
                (line[:-2]*n + line[1:-1])*n + line[2:],
                minlength=n*n*n).astype(np.uint64)

    def add_file(self, path: str):
        with open(path, errors="ignore") as file:
            self.add_text(file.read())

    def total_chars(self) -> int:
        return int(self.chars.sum())

    def ngram_counts(self, ngram: str) -> tuple[int, int]:
        """Counts for an ngram of one to three characters, as
        (count, skipgram count). The skipgram count is only meaningful for
        bigrams. Unknown characters and other lengths count as zero."""
        idx = [self.corpus_char(c) for c in ngram]
        if 0 in idx:
            return 0, 0
        if len(idx) == 1:
            return int(self.chars[idx[0]]), 0
        elif len(idx) == 2:
            i = self.bigram_idx(*idx)
            return int(self.bigrams[i]), int(self.skipgrams[i])
        elif len(idx) == 3:
            return int(self.trigrams[self.trigram_idx(*idx)]), 0
        return 0, 0

    def save(self, path: str):
        # file handle so numpy doesn't append .npz
        with open(path, "wb") as file:
            np.savez_compressed(
                file,
                char_list=np.array(
                    ["".join(group) for group in self.char_list]),
                chars=self.chars,
                bigrams=self.bigrams,
                skipgrams=self.skipgrams,
                trigrams=self.trigrams,
            )

def load(path: str) -> Corpus:
    with np.load(path) as data:
        corpus_ = Corpus([list(group) for group in data["char_list"]])
        for table in ("chars", "bigrams", "skipgrams", "trigrams"):
            loaded = data[table]
            if loaded.shape != getattr(corpus_, table).shape:
                raise ValueError(f"corpus table {table} has the wrong size")
            setattr(corpus_, table, loaded.astype(np.uint64))
    return corpus_

def from_file(path: str, char_list: Iterable[Sequence[str]] = None) -> Corpus:
    corpus_ = Corpus(char_list)
    corpus_.add_file(path)
    return corpus_

