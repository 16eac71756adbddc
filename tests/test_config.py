import tomllib

import pytest

import imo.config as config_mod
from imo.config import parse_config, parse_extensions, parse_verbosity
from imo.errors import ConfigError
from imo.model import Verbosity


def test_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cfg = parse_config({})
    assert cfg.input_dir == tmp_path.resolve()
    assert cfg.output_dir == (tmp_path / "image-organizer").resolve()
    assert cfg.extensions == {".jpg", ".jpeg", ".png", ".bmp"}
    assert cfg.max_depth == 10
    assert cfg.verbosity is Verbosity.SILENT
    assert not cfg.emit_errors and not cfg.emit_info
    assert cfg.scan_only is False
    assert cfg.mkdirs is True


def test_full_toml(tmp_path):
    cfg_text = f"""
[paths]
input = "{tmp_path / 'in'}"
output = "{tmp_path / 'out'}"

[filter]
extensions = ["JPG", "Png", "tif"]

[scan]
max_depth = 3
verbosity = "errors"
scan_only = true

[io]
mkdirs = false
preserve_metadata = true
"""
    cfg = parse_config(tomllib.loads(cfg_text))
    assert cfg.input_dir == (tmp_path / "in").resolve()
    assert cfg.extensions == {".jpg", ".png", ".tif"}
    assert cfg.max_depth == 3
    assert cfg.emit_errors and not cfg.emit_info
    assert cfg.scan_only is True
    assert cfg.mkdirs is False
    assert cfg.preserve_metadata is True


def test_pipe_separated_extensions():
    assert parse_extensions("Jpg|PNG||bmp") == {".jpg", ".png", ".bmp"}


def test_extensions_only_fold_case():
    assert parse_extensions(".jpg| png") == {"..jpg", ". png"}


@pytest.mark.parametrize("value", ["", "|", " | ", [], 42])
def test_empty_or_bad_extensions_rejected(value):
    with pytest.raises(ConfigError):
        parse_extensions(value)


def test_negative_depth_rejected():
    with pytest.raises(ConfigError, match="max_depth"):
        parse_config({"scan": {"max_depth": -1}})


def test_wrong_type_rejected():
    with pytest.raises(ConfigError, match="scan.max_depth"):
        parse_config({"scan": {"max_depth": "deep"}})
    with pytest.raises(ConfigError, match="io.mkdirs"):
        parse_config({"io": {"mkdirs": "yes"}})


def test_verbosity_levels():
    assert parse_verbosity("ALL") is Verbosity.ALL
    assert parse_verbosity(1) is Verbosity.ERRORS
    assert Verbosity.SILENT < Verbosity.ERRORS < Verbosity.ALL
    with pytest.raises(ConfigError):
        parse_verbosity("loud")
    with pytest.raises(ConfigError):
        parse_verbosity(7)


def test_unresolvable_path_is_config_error(monkeypatch):
    def looping(s):
        raise RuntimeError(f"Symlink loop from {s!r}")

    monkeypatch.setattr(config_mod, "as_path", looping)

    with pytest.raises(ConfigError, match="input path"):
        parse_config({"paths": {"input": "loop"}})


def test_config_path_that_is_a_directory(tmp_path):
    with pytest.raises(ConfigError, match="Cannot read config file"):
        config_mod.load_toml(tmp_path)
