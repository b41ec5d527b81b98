import pytest

from pd2mm.cleaner import Cleaner, Target, clean_path, should_skip
from pd2mm.config import Config, PathInfo, PathSearch


@pytest.fixture
def search():
    return PathSearch(
        mods="mods",
        output=PathInfo("out", ["{output}/saves"]),
        extract=PathInfo("ext", []),
        export=PathInfo("exp", []),
    )


def _populate(root):
    (root / "out" / "sub").mkdir(parents=True)
    (root / "out" / "saves").mkdir(parents=True)
    (root / "out" / "a.txt").write_text("a")
    (root / "out" / "sub" / "b.txt").write_text("b")
    (root / "out" / "saves" / "s.txt").write_text("s")
    (root / "ext" / "mod").mkdir(parents=True)
    (root / "ext" / "mod" / "m.txt").write_text("m")


def test_should_skip_matches_formatted_exclusion(tmp_path, search):
    assert should_skip(str(tmp_path / "out" / "saves" / "s.txt"), search, search.output)
    assert not should_skip(str(tmp_path / "out" / "other" / "s.txt"), search, search.output)


def test_should_skip_without_exclusions_is_false(tmp_path, search):
    assert not should_skip(str(tmp_path / "ext" / "saves" / "x"), search, search.extract)


def test_clean_path_keeps_excluded_files_and_removes_empty_dirs(tmp_path, monkeypatch, search):
    monkeypatch.chdir(tmp_path)
    _populate(tmp_path)

    errors = clean_path(search, search.output)

    assert errors == []
    assert not (tmp_path / "out" / "a.txt").exists()
    assert not (tmp_path / "out" / "sub").exists()
    assert (tmp_path / "out" / "saves" / "s.txt").read_text() == "s"
    assert (tmp_path / "out").is_dir()


def test_clean_path_of_missing_directory_does_nothing(tmp_path, monkeypatch, search):
    monkeypatch.chdir(tmp_path)
    assert clean_path(search, PathInfo("absent")) == []
    assert not (tmp_path / "absent").exists()


def test_clean_calls_update_after_becoming_inactive(tmp_path, monkeypatch, search):
    monkeypatch.chdir(tmp_path)
    _populate(tmp_path)
    seen = []
    cleaner = Cleaner()
    cleaner.register_update(lambda: seen.append(cleaner.is_active()))

    cleaner.clean(search, search.extract)

    assert seen == [False]
    assert not (tmp_path / "ext" / "mod").exists()


def test_clean_logs_update_failure_without_raising(tmp_path, monkeypatch, search, caplog):
    monkeypatch.chdir(tmp_path)

    def boom():
        raise RuntimeError("update exploded")

    cleaner = Cleaner(boom)
    assert cleaner.clean(search, search.extract) == []
    assert "update exploded" in caplog.text
    assert cleaner.is_active() is False


def test_clean_configs_only_touches_target(tmp_path, monkeypatch, search):
    monkeypatch.chdir(tmp_path)
    _populate(tmp_path)
    calls = []

    Cleaner().clean_configs([Config(mods=[search])], Target.EXTRACT, lambda: calls.append(1))

    assert calls == [1]
    assert not (tmp_path / "ext" / "mod" / "m.txt").exists()
    assert (tmp_path / "out" / "a.txt").exists()


def test_clean_configs_rejects_unknown_target(search):
    with pytest.raises(ValueError):
        Cleaner().clean_configs([Config(mods=[search])], 9, lambda: None)