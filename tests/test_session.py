"""
Tests for the session: the command line surface and the actions it
applies.
"""

import json
import os

import pytest

import command
import corpus
from command import (ImportCorpus, Reload, SetMetricsDirectory,
                     ViewNotification)
from conftest import write_layout
from session import Session, scan_dir


class TestCommandLine:

    def test_starts_with_every_option(self, session_):
        options = session_.registry()
        assert len(options) == 15
        assert session_.buffer == ""
        assert session_.suggestions() == [o.display for o in options]

    def test_typing_and_expanding(self, session_):
        assert session_.on_input_changed("s") == ("s", (0, 4, 7))
        assert session_.suggestions() == [
            "set-metrics-directory", "swap", "save-layout"]
        assert session_.on_input_changed("s ") == ("swap ", ())

    def test_submit_swap(self, session_):
        for text in ("s", "s ", "swap q", "swap q ", "swap q w"):
            session_.on_input_changed(text)
        action = session_.on_submit()
        assert action == command.SwapKeys("q", "w")
        assert session_.layout.keys[0][:2] == ["w", "q"]
        assert session_.buffer == ""

    def test_swap_with_missing_key(self, session_):
        before = [row[:] for row in session_.layout.keys]
        session_.on_input_changed("swap q 9")
        session_.on_submit()
        assert session_.layout.keys == before

    def test_unknown_command_keeps_buffer(self, session_):
        session_.on_input_changed("frobnicate")
        assert session_.on_submit() is None
        assert session_.buffer == "frobnicate"

    def test_precision(self, session_):
        session_.on_input_changed("precision 4")
        session_.on_submit()
        assert session_.config.stat_precision == 4

    def test_huge_precision_is_capped(self, session_):
        session_.corpus = corpus.Corpus()
        session_.corpus.add_text("abab")
        session_.on_input_changed("precision 999999999999")
        session_.on_submit()
        assert session_.config.stat_precision == 10

        session_.on_input_changed("ngram-frequency ab")
        session_.on_submit()
        assert session_.notification[0] == (
            "total: (50.0000000000%, 0.0000000000%)")

    def test_switch_layout(self, session_, data_dir):
        write_layout(data_dir, "Colemak DH", filename="colemak-dh.json")
        session_.on_input_changed("reload")
        session_.on_submit()
        session_.layout.swap("q", "w")

        session_.on_input_changed("layout colemak-dh")
        session_.on_submit()
        assert session_.current_layout == "colemak-dh"
        assert session_.layout.name == "Colemak DH"
        assert session_.notification[0] == "switched to layout Colemak DH"

        session_.on_input_changed("layout Qwerty")
        session_.on_submit()
        assert session_.current_layout == "qwerty"
        assert session_.layout.keys[0][:2] == ["q", "w"]

    def test_switch_to_unknown_layout(self, session_):
        session_.on_input_changed("layout dvorak")
        session_.on_submit()
        assert session_.current_layout == "qwerty"
        assert session_.notification == ("no such layout: dvorak",
                                         "layouts: qwerty")

    def test_switch_corpus(self, session_, data_dir, tmp_path):
        for name, text in (("one", "aaaa"), ("two", "abab")):
            path = tmp_path / f"{name}.txt"
            path.write_text(text)
            corpus.from_file(str(path)).save(
                os.path.join(data_dir, "corpora", f"{name}.corpus"))
        session_.rescan()

        session_.on_input_changed("corpus two")
        session_.on_submit()
        assert session_.current_corpus == "two"
        assert session_.notification[0] == "switched to corpus two"
        session_.on_input_changed("ngram-frequency ab")
        session_.on_submit()
        assert session_.notification[0] == "total: (50.0%, 0.0%)"

        session_.on_input_changed("corpus three")
        session_.on_submit()
        assert session_.current_corpus == "two"
        assert session_.notification[0] == "no such corpus: three"

    def test_switch_metrics(self, session_, data_dir):
        with open(os.path.join(data_dir, "metrics", "default.metrics"),
                  "wb") as file:
            file.write(b"\x00")
        session_.rescan()

        session_.on_input_changed("metrics default")
        session_.on_submit()
        assert session_.current_metrics == "default"
        session_.on_input_changed("metrics other")
        session_.on_submit()
        assert session_.current_metrics == "default"
        assert session_.notification[0] == "no such metrics list: other"

    def test_quit_saves_config(self, session_, config_path):
        session_.config.stat_precision = 2
        session_.on_input_changed("quit")
        session_.on_submit()
        assert not session_.running
        with open(config_path) as file:
            assert json.load(file)["stat_precision"] == 2


class TestStartup:

    def test_loads_first_layout_and_corpus(self, data_dir, config_path,
                                           tmp_path):
        write_layout(data_dir, "Colemak", filename="colemak.json")
        text = tmp_path / "text.txt"
        text.write_text("hello world")
        corpus.from_file(str(text)).save(
            os.path.join(data_dir, "corpora", "english.corpus"))

        s = Session(data_dir=data_dir, config_path=config_path)
        assert list(s.layouts) == ["colemak", "qwerty"]
        assert s.current_layout == "colemak"
        assert s.current_corpus == "english"
        assert s.corpus.total_chars() == 11

    def test_working_layout_is_a_copy(self, session_):
        session_.layout.swap("a", "s")
        assert session_.layouts["qwerty"].keys[1][:2] == ["a", "s"]

    def test_bad_files_are_skipped(self, data_dir, config_path):
        with open(os.path.join(data_dir, "layouts", "broken.json"), "w") as f:
            f.write("{not json")
        with open(os.path.join(data_dir, "corpora", "broken.corpus"), "w") as f:
            f.write("not a corpus")
        os.makedirs(os.path.dirname(config_path))
        with open(config_path, "w") as f:
            f.write("[1, 2")

        s = Session(data_dir=data_dir, config_path=config_path)
        assert list(s.layouts) == ["qwerty"]
        assert s.current_corpus == "broken"
        assert s.corpus is None
        assert s.config.stat_precision == 1

    def test_empty_data_dir(self, tmp_path, config_path):
        s = Session(data_dir=str(tmp_path / "empty"), config_path=config_path)
        assert s.layout is None
        assert s.corpus is None
        for sub in ("layouts", "corpora", "metrics"):
            assert os.path.isdir(tmp_path / "empty" / sub)

    def test_swap_without_layout(self, tmp_path, config_path):
        s = Session(data_dir=str(tmp_path / "empty"), config_path=config_path)
        s.on_input_changed("swap a b")
        assert s.on_submit() == command.SwapKeys("a", "b")


class TestActions:

    def test_set_metrics_directory(self, session_, ask_path, config_path,
                                   tmp_path):
        ask_path.answers.append(str(tmp_path))
        session_.apply(SetMetricsDirectory())
        assert ask_path.asked == [("metrics directory", True)]
        assert session_.config.metrics_directory == str(tmp_path)
        assert session_.notification[0] == "successfully set metric directory"
        with open(config_path) as file:
            assert json.load(file)["metrics_directory"] == str(tmp_path)

    def test_set_metrics_directory_cancelled(self, session_):
        session_.apply(SetMetricsDirectory())
        assert session_.config.metrics_directory is None
        assert session_.notification[0] == "started"

    def test_reload_imports_metrics(self, session_, data_dir, tmp_path):
        source = tmp_path / "metrics-source"
        source.mkdir()
        (source / "default.metrics").write_bytes(b"\x00\x01")
        (source / "notes.txt").write_text("ignored")
        session_.config.metrics_directory = str(source)

        session_.apply(Reload())
        assert session_.notification[0] == "reloaded successfully"
        assert list(session_.metric_lists) == ["default"]
        with open(os.path.join(data_dir, "metrics", "default.metrics"),
                  "rb") as file:
            assert file.read() == b"\x00\x01"

    def test_reload_without_directory(self, session_):
        session_.apply(Reload())
        assert session_.notification[0] == "no metrics directory set"

    def test_reload_with_no_metric_files(self, session_, tmp_path):
        session_.config.metrics_directory = str(tmp_path)
        session_.apply(Reload())
        assert session_.notification[0] == "directory contained no metric files"

    def test_reload_discards_unsaved_swaps(self, session_):
        session_.layout.swap("q", "w")
        session_.apply(Reload())
        assert session_.layout.keys[0][:2] == ["q", "w"]

    def test_import_corpus(self, session_, ask_path, data_dir, tmp_path):
        text = tmp_path / "sample.txt"
        text.write_text("The quick brown fox")
        ask_path.answers.append(str(text))

        session_.apply(ImportCorpus())
        assert ask_path.asked == [("corpus file", False)]
        assert session_.notification[0] == "successfully imported corpus"
        assert session_.corpora == {
            "sample": os.path.join(data_dir, "corpora", "sample.corpus")}
        imported = corpus.load(session_.corpora["sample"])
        assert imported.ngram_counts("t")[0] == 1

    def test_import_selects_first_corpus(self, session_, ask_path, tmp_path):
        assert session_.corpus is None
        session_.layout.swap("q", "w")
        text = tmp_path / "sample.txt"
        text.write_text("abab")
        ask_path.answers.append(str(text))

        session_.apply(ImportCorpus())
        assert session_.current_corpus == "sample"
        assert session_.layout.keys[0][:2] == ["w", "q"]
        session_.on_input_changed("ngram-frequency ab")
        session_.on_submit()
        assert session_.notification[0] == "total: (50.0%, 0.0%)"

    def test_import_keeps_selected_corpus(self, session_, ask_path,
                                          data_dir, tmp_path):
        for name in ("first", "second"):
            text = tmp_path / f"{name}.txt"
            text.write_text(name)
            ask_path.answers.append(str(text))
            session_.apply(ImportCorpus())
        assert list(session_.corpora) == ["first", "second"]
        assert session_.current_corpus == "first"

    def test_quiet_reload_keeps_notification(self, session_):
        session_.notify("saved layout Mine")
        session_.apply(Reload(quiet=True))
        assert session_.notification[0] == "saved layout Mine"

    def test_import_missing_file(self, session_, ask_path, tmp_path):
        ask_path.answers.append(str(tmp_path / "missing.txt"))
        session_.apply(ImportCorpus())
        msg, detail = session_.notification
        assert msg == "error importing corpus"
        assert detail

    def test_view_notification(self, session_):
        session_.apply(ViewNotification())
        assert session_.show_notification

    def test_unknown_action(self, session_):
        with pytest.raises(KeyError):
            session_.apply(object())


def test_scan_dir(tmp_path):
    (tmp_path / "b.corpus").write_text("")
    (tmp_path / "a.corpus").write_text("")
    (tmp_path / "sub").mkdir()
    assert scan_dir(str(tmp_path)) == {
        "a": str(tmp_path / "a.corpus"),
        "b": str(tmp_path / "b.corpus"),
    }
