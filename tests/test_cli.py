import pytest

from ctlptl.cli import main, version_stamp


def test_version_stamp_truncates_time():
    assert version_stamp("1.2.3", "2022-01-01T10:00:00Z") == "v1.2.3, built 2022-01-01"


def test_version_stamp_date_without_time():
    assert version_stamp("1.2.3", "2022-01-01") == "v1.2.3, built 2022-01-01"


def test_version_stamp_unknown_date():
    assert version_stamp("1.2.3", "") == "v1.2.3, built unknown"


def test_version_stamp_default_version():
    stamp = version_stamp("", "")
    assert stamp.startswith("v")
    assert stamp.endswith(", built unknown")
    assert len(stamp) > len("v, built unknown")


def test_main_version(capsys):
    assert main(["version"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("v")
    assert ", built " in out


def test_main_without_command_prints_help(capsys):
    assert main([]) == 0
    assert "version" in capsys.readouterr().out


def test_main_unknown_command():
    with pytest.raises(SystemExit) as info:
        main(["frobnicate"])
    assert info.value.code == 2