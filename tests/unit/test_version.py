import pytest

from tracechain import __version__
from tracechain.units.version import (
    VERSION, compare_versions, get_major_version, get_version, parse_version
)


def test_package_version_matches_tuple():
    assert __version__ == get_version(VERSION)
    assert get_version((0, 1, 0, "dev", 1)) == "0.1.0.dev1"


@pytest.mark.parametrize("version, expected", [
    ((1, 0, 0, "final", 0), "1.0.0"),
    ((1, 2, 0, "rc", 2), "1.2.0-rc2"),
    ((2, 0, 1, "beta", 0), "2.0.1-beta"),
])
def test_get_version(version, expected):
    assert get_version(version) == expected
    assert parse_version(expected) == version


def test_get_major_version():
    assert get_major_version((3, 4, 5, "final", 0)) == "3.4"


def test_parse_rejects_garbage():
    with pytest.raises(ValueError):
        parse_version("not-a-version")


def test_compare_versions():
    assert compare_versions("0.1.0.dev1", "0.1.0") == -1
    assert compare_versions("1.2.0-rc2", "1.2.0-rc1") == 1
    assert compare_versions("1.0", (1, 0, 0, "final", 0)) == 0
