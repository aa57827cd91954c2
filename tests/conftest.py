import json
import os

import pytest

import config
from session import Session

QWERTY = [
    list("qwertyuiop"),
    list("asdfghjkl;"),
    list("zxcvbnm,./"),
]

def write_layout(data_dir, name, keys=QWERTY, filename=None):
    layouts_dir = os.path.join(data_dir, "layouts")
    os.makedirs(layouts_dir, exist_ok=True)
    path = os.path.join(layouts_dir, filename or f"{name.lower()}.json")
    with open(path, "w") as file:
        json.dump({"name": name, "authors": ["Sholes"], "keys": keys}, file)
    return path

class PathAnswers:
    """Stands in for the path prompt; answers with whatever is queued."""

    def __init__(self):
        self.answers = []
        self.asked = []

    def __call__(self, prompt, directory):
        self.asked.append((prompt, directory))
        return self.answers.pop(0) if self.answers else None

@pytest.fixture
def data_dir(tmp_path):
    path = str(tmp_path / "data")
    config.initial_setup(path)
    write_layout(path, "Qwerty")
    return path

@pytest.fixture
def config_path(tmp_path):
    return str(tmp_path / "config" / "config.json")

@pytest.fixture
def ask_path():
    return PathAnswers()

@pytest.fixture
def session_(data_dir, config_path, ask_path):
    return Session(ask_path, data_dir=data_dir, config_path=config_path)
