import pathlib

import pytest

import ackulator
from ackulator.core import data
from ackulator.core import iotools


@pytest.fixture
def workdir(tmp_path: pathlib.Path, monkeypatch):
    """An empty working directory that doubles as the home directory."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv('HOME', str(tmp_path))
    monkeypatch.delenv('ACKULATOR_INI', raising=False)
    return tmp_path


def test_defaults(workdir: pathlib.Path):
    """Without a configuration file, every setting has a default."""
    environment = ackulator.Environment()
    assert environment.path is None
    assert environment.ambiguity is data.Ambiguity.PREFER_VALUES
    assert environment.prelude
    assert set(environment) == {'ambiguity', 'prelude'}


def test_read_file(workdir: pathlib.Path):
    (workdir / 'ackulator.ini').write_text(
        "[ackulator]\nambiguity = prefer_meta\nprelude = no\n"
    )
    environment = ackulator.Environment()
    assert environment.path == (workdir / 'ackulator.ini').resolve()
    assert environment.ambiguity is data.Ambiguity.PREFER_META
    assert not environment.prelude
    assert environment['prelude'] == 'no'
    with pytest.raises(KeyError):
        environment['nothing']


def test_environment_variable(workdir: pathlib.Path, monkeypatch):
    """A directory named by ACKULATOR_INI is searched too."""
    other = workdir / 'settings'
    other.mkdir()
    (other / 'ackulator.ini').write_text("[ackulator]\nprelude = off\n")
    monkeypatch.setenv('ACKULATOR_INI', str(other))
    environment = ackulator.Environment()
    assert not environment.prelude
    assert environment.ambiguity is data.Ambiguity.PREFER_VALUES


def test_bad_policy(workdir: pathlib.Path):
    (workdir / 'ackulator.ini').write_text("[ackulator]\nambiguity = both\n")
    with pytest.raises(ValueError):
        ackulator.Environment().ambiguity


def test_search(tmp_path: pathlib.Path):
    """Search skips missing directories and stops at the first match."""
    (tmp_path / 'a').mkdir()
    (tmp_path / 'b').mkdir()
    (tmp_path / 'b' / 'target.txt').write_text('found')
    paths = [None, tmp_path / 'missing', tmp_path / 'a', tmp_path / 'b']
    found = iotools.search(paths, 'target.txt')
    assert found == (tmp_path / 'b' / 'target.txt').resolve()
    assert iotools.search(paths, 'other.txt') is None
    assert iotools.read_source(found) == 'found'
    with pytest.raises(iotools.NonExistentPathError):
        iotools.read_source(tmp_path / 'missing.txt')
