"""Path Rules — pure syntactic checks on user-configured storage paths.

Invariants:
    - No filesystem access: every function answers from the string alone
    - A recognized drive-letter prefix ("C:") is never reported as an illegal ':'
    - normalize_configured_path maps blank/whitespace/non-str to None ("not configured")

Design Decisions:
    - Runtime OS passed in (os_name) instead of read from os.name: tests cover the
      Windows rules on a POSIX runner and vice versa
    - Foreign-platform detection runs before any filesystem call because a
      drive-letter path on a Linux host can hang on network mounts instead of failing
"""

import re

_DRIVE_PREFIX = re.compile(r"^[A-Za-z]:(?=[\\/]|$)")
_WINDOWS_ILLEGAL = re.compile(r'[<>:"|?*\x00-\x1f]')
_POSIX_MOUNT_STYLE = re.compile(r"^/(Users|home|Volumes|mnt|media)/")


def normalize_configured_path(value: object) -> str | None:
    """Stored setting value → usable path string, or None when effectively unset."""
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def is_drive_letter_path(path: str) -> bool:
    return bool(_DRIVE_PREFIX.match(path))


def is_unc_path(path: str) -> bool:
    return path.startswith("\\\\")


def foreign_platform_reason(path: str, os_name: str) -> str | None:
    """Actionable message when the path targets another OS than the one running."""
    if os_name != "nt":
        if is_drive_letter_path(path) or is_unc_path(path):
            return (
                f"'{path}' is a Windows path, but the server runs on a "
                "non-Windows system and cannot reach it. Use a folder path "
                "on the server's own filesystem (for example /srv/reports), "
                "or a mounted share."
            )
        return None
    if _POSIX_MOUNT_STYLE.match(path):
        return (
            f"'{path}' looks like a macOS/Linux path, but the server runs on "
            "Windows. Use a drive-letter path such as C:\\Reports."
        )
    return None


def illegal_characters(path: str, os_name: str) -> list[str]:
    """Characters illegal for the path's filesystem convention, sorted."""
    windows_style = os_name == "nt" or is_drive_letter_path(path)
    if not windows_style:
        return ["\\x00"] if "\x00" in path else []
    body = path[2:] if is_drive_letter_path(path) else path
    if is_unc_path(body):
        body = body[2:]
    return sorted(set(_WINDOWS_ILLEGAL.findall(body)))


def has_traversal(path: str) -> bool:
    """True when any path segment is '..'."""
    return ".." in re.split(r"[\\/]", path)


def is_cloud_synced(path: str, markers: list[str]) -> bool:
    """Heuristic: path lives under a sync agent's folder (OneDrive, Dropbox, ...)."""
    lowered = path.lower()
    return any(marker.lower() in lowered for marker in markers if marker)
