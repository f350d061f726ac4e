"""
Version utility functions for the TraceChain Framework.

The version is kept as a (major, minor, micro, releaselevel, serial) tuple and
rendered as a PEP 440 string on demand.
"""

import re


VERSION = (0, 1, 0, "dev", 1)

_RELEASE_LEVELS = ["dev", "alpha", "beta", "rc", "final"]

_VERSION_PATTERN = re.compile(
    r"(?P<major>\d+)\.(?P<minor>\d+)(?:\.(?P<micro>\d+))?"
    r"(?:[.-](?P<releaselevel>dev|alpha|beta|rc|final)(?P<serial>\d+)?)?"
)


def get_version(version: tuple[int, int, int, str, int] | None = None) -> str:
    """
    Return a PEP 440-compliant version number.

    Args:
        version: Version tuple (major, minor, micro, releaselevel, serial).
                 Defaults to the package VERSION.

    Returns:
        Version string such as "0.1.0.dev1" or "1.2.0-rc2"
    """
    major, minor, micro, releaselevel, serial = version or VERSION

    version_str = f"{major}.{minor}.{micro}"
    if releaselevel != "final":
        separator = "." if releaselevel == "dev" else "-"
        version_str += f"{separator}{releaselevel}"
        if serial > 0:
            version_str += str(serial)

    return version_str


def get_major_version(version: tuple[int, int, int, str, int] | None = None) -> str:
    """Return "major.minor" for the given (or package) version."""
    major, minor, _, _, _ = version or VERSION
    return f"{major}.{minor}"


def parse_version(value: str) -> tuple[int, int, int, str, int]:
    """
    Parse a version string produced by get_version back into a tuple.

    Raises:
        ValueError: If the string is not a recognised version
    """
    match = _VERSION_PATTERN.fullmatch(value.strip())
    if not match:
        raise ValueError(f"Unrecognised version string: {value!r}")

    groups = match.groupdict()
    return (
        int(groups["major"]),
        int(groups["minor"]),
        int(groups["micro"] or 0),
        groups["releaselevel"] or "final",
        int(groups["serial"] or 0),
    )


def compare_versions(version1: str | tuple, version2: str | tuple) -> int:
    """
    Compare two versions.

    Returns:
        -1 if version1 < version2, 0 if equal, 1 if version1 > version2
    """
    v1 = parse_version(version1) if isinstance(version1, str) else tuple(version1)
    v2 = parse_version(version2) if isinstance(version2, str) else tuple(version2)

    key1 = (v1[0], v1[1], v1[2], _RELEASE_LEVELS.index(v1[3]), v1[4])
    key2 = (v2[0], v2[1], v2[2], _RELEASE_LEVELS.index(v2[3]), v2[4])

    if key1 < key2:
        return -1
    if key1 > key2:
        return 1
    return 0
