"""
Platform applicability and storage paths of version-manifest libraries.
"""

import logging
import platform
import re

from launcher_store.exceptions import SchemaError
from launcher_store.models.manifests import LibraryInfo, LibraryRule

log = logging.getLogger(__name__)


def get_os_name() -> str:
    """Gets the current OS name as used by library rules ('windows', 'osx', 'linux')."""
    system = platform.system()
    if system == "Windows":
        return "windows"
    if system == "Darwin":
        return "osx"
    return "linux"


def get_arch_bits() -> str:
    """Gets the pointer width of the current machine ('32' or '64')."""
    machine = platform.machine().lower()
    if machine in ("i386", "i686", "x86") or (
        machine.startswith("arm") and "64" not in machine
    ):
        return "32"
    return "64"


def _rule_applies(rule: LibraryRule, os_name: str, arch: str) -> bool:
    """Checks whether a rule's OS constraints match the given environment."""
    if rule.os is None:
        return True
    if rule.os.name and rule.os.name != os_name:
        return False
    if rule.os.arch and rule.os.arch != ("x86" if arch == "32" else "x64"):
        return False
    if rule.os.version:
        try:
            if not re.search(rule.os.version, platform.release()):
                return False
        except re.error:
            log.debug(f"Ignoring invalid OS version pattern '{rule.os.version}'")
    return True


def is_library_allowed(
    library: LibraryInfo, os_name: str | None = None, arch: str | None = None
) -> bool:
    """
    Decides whether a library is usable on the given (or current) platform.

    Without rules a library is allowed. Otherwise it starts disallowed and every
    rule whose conditions match sets the outcome from its action, so the last
    matching rule wins. A native library with no classifier for the OS is not
    allowed either.
    """
    os_name = os_name or get_os_name()
    arch = arch or get_arch_bits()

    allowed = not library.rules
    for rule in library.rules:
        if _rule_applies(rule, os_name, arch):
            allowed = rule.action == "allow"

    if allowed and library.natives and os_name not in library.natives:
        return False
    return allowed


def get_library_path(
    library: LibraryInfo, os_name: str | None = None, arch: str | None = None
) -> str:
    """
    Derives a library's relative storage path from its maven coordinate.

    'org.lwjgl:lwjgl:3.2.2' -> 'org/lwjgl/lwjgl/3.2.2/lwjgl-3.2.2.jar'; native
    libraries get the OS classifier appended to the file name.

    Raises:
        SchemaError: If the name is not a 'group:artifact:version' coordinate.
    """
    parts = library.name.split(":")
    if len(parts) < 3 or not all(parts[:3]):
        raise SchemaError(f"Invalid library name '{library.name}'")

    group, artifact, version = parts[:3]
    classifiers = parts[3:]

    os_name = os_name or get_os_name()
    if native := library.natives.get(os_name):
        classifiers.append(native.replace("${arch}", arch or get_arch_bits()))

    suffix = "".join(f"-{c}" for c in classifiers)
    return f"{group.replace('.', '/')}/{artifact}/{version}/{artifact}-{version}{suffix}.jar"
