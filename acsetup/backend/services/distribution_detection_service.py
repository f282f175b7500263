#!/usr/bin/env python3
"""
Distribution Detection Service

Environment checks performed once at startup: refuse to run as root,
identify the Linux distribution from os-release, pick its package manager
and verify that the required tools are installed.
"""

import os
import re
import shlex
import getpass
import logging
import shutil
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..core.exceptions import PreconditionError
from ..data.game_data import ISSUES_URL
from ..models.configuration import DistributionInfo

logger = logging.getLogger(__name__)

OS_RELEASE_PATH = Path("/etc/os-release")

DEFAULT_REQUIRED_PACKAGES = ("tar", "unzip", "glib2", "protontricks")

# Checked in order; (family, distribution ids, install command, packages)
SUPPORTED_DISTRIBUTIONS = [
    ("dnf", ("fedora", "nobara", "ultramarine"), "dnf install", DEFAULT_REQUIRED_PACKAGES),
    ("apt", ("debian", "ubuntu", "linuxmint", "pop"), "apt install", DEFAULT_REQUIRED_PACKAGES),
    ("arch", ("arch", "endeavouros", "steamos", "cachyos"), "pacman -S", DEFAULT_REQUIRED_PACKAGES),
    ("opensuse", ("opensuse-tumbleweed",), "zypper install", DEFAULT_REQUIRED_PACKAGES),
    ("slackware", ("slackware", "salix"), "slackpkg install or sboinstall",
     ("tar", "infozip", "glib2", "protontricks")),
    ("gentoo", ("gentoo",), "emerge",
     ("app-arch/tar", "app-arch/unzip", "dev-libs/glib2", "app-emulation/protontricks")),
    ("void", ("void",), "xbps-install -S", ("tar", "unzip", "glib", "protontricks")),
]

# Packages whose executable is not named after the package
PACKAGE_BINARIES = {
    "glib2": "gio",
    "glib": "gio",
    "infozip": "unzip",
}

ALIAS_FILES = (".bashrc", ".bash_aliases")
_ALIAS_RE = re.compile(r'^\s*alias\s+([A-Za-z0-9_.:+-]+)=(.*)$')


def is_root_user() -> bool:
    """True when running as root, by name or by effective uid."""
    try:
        if os.geteuid() == 0:
            return True
    except AttributeError:
        pass
    user = os.environ.get("USER") or getpass.getuser()
    return user == "root"


def parse_os_release(path: Path = OS_RELEASE_PATH) -> Dict[str, str]:
    """Parse an os-release style KEY=value file (values may be quoted)."""
    fields = {}
    with open(path, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith('#') or '=' not in line:
                continue
            key, _, raw_value = line.partition('=')
            try:
                parts = shlex.split(raw_value)
            except ValueError:
                parts = [raw_value.strip('"\'')]
            fields[key.strip()] = " ".join(parts)
    return fields


def resolve_distribution(fields: Dict[str, str]) -> DistributionInfo:
    """
    Map os-release fields to a supported distribution family.

    ID is matched first against every family, then each entry of ID_LIKE.
    Raises PreconditionError for missing fields or unsupported systems.
    """
    for required in ("ID", "NAME"):
        if not fields.get(required):
            raise PreconditionError(f"Required field '{required}' is missing from os-release.")

    distro_id = fields["ID"]
    name = fields["NAME"]
    id_like = fields.get("ID_LIKE") or "undefined"

    for candidate in [distro_id] + id_like.split():
        for family, ids, install_command, packages in SUPPORTED_DISTRIBUTIONS:
            if candidate in ids:
                logger.info(f"Distribution '{distro_id}' (like '{id_like}') uses the {family} family")
                return DistributionInfo(
                    id=distro_id,
                    name=name,
                    family=family,
                    install_command=install_command,
                    required_packages=tuple(packages),
                    id_like=id_like,
                )

    logger.warning(f"Unsupported distribution: ID={distro_id} ID_LIKE={id_like}")
    raise PreconditionError(
        f"{name} is not currently supported.\n"
        f"You can open an issue on Github ({ISSUES_URL}) with your system details to add it as supported."
    )


def package_binary(package: str) -> str:
    """Executable expected for a package name such as 'app-arch/tar'."""
    base = package.rsplit('/', 1)[-1]
    return PACKAGE_BINARIES.get(base, base)


def load_shell_aliases(home: Optional[Path] = None) -> Dict[str, str]:
    """Collect `alias name=value` definitions from the user's bash files."""
    home = Path(home) if home else Path.home()
    aliases = {}
    for filename in ALIAS_FILES:
        alias_file = home / filename
        if not alias_file.is_file():
            continue
        try:
            with open(alias_file, 'r', encoding='utf-8', errors='replace') as f:
                for line in f:
                    match = _ALIAS_RE.match(line)
                    if not match:
                        continue
                    try:
                        value = shlex.split(match.group(2), comments=True)
                    except ValueError:
                        continue
                    if value:
                        aliases[match.group(1)] = value[0]
        except OSError as e:
            logger.warning(f"Could not read {alias_file}: {e}")
    return aliases


def find_executable(name: str, aliases: Optional[Dict[str, str]] = None) -> Optional[str]:
    """Return the alias definition or PATH location of name, or None."""
    if aliases and aliases.get(name):
        return aliases[name]
    return shutil.which(name)


class DistributionDetectionService:
    """
    Runs the startup environment checks and returns the DistributionInfo.
    """

    def __init__(self, os_release_path: Path = OS_RELEASE_PATH, home: Optional[Path] = None):
        self.os_release_path = Path(os_release_path)
        self.home = home
        self._aliases = None

    @property
    def aliases(self) -> Dict[str, str]:
        if self._aliases is None:
            self._aliases = load_shell_aliases(self.home)
        return self._aliases

    def detect(self) -> DistributionInfo:
        """Perform every check, raising PreconditionError on the first failure."""
        if is_root_user():
            raise PreconditionError("Please do not run as root.")

        try:
            fields = parse_os_release(self.os_release_path)
        except OSError as e:
            raise PreconditionError(f"Could not read {self.os_release_path}: {e}")
        distribution = resolve_distribution(fields)

        missing = self.find_missing_packages(distribution)
        if missing:
            package, binary = missing[0]
            raise PreconditionError(
                f"{binary} is not installed, run '{distribution.install_hint(package)}' to install."
            )
        return distribution

    def find_missing_packages(self, distribution: DistributionInfo) -> List[Tuple[str, str]]:
        """(package, executable) pairs whose executable cannot be found."""
        missing = []
        for package in distribution.required_packages:
            binary = package_binary(package)
            location = find_executable(binary, self.aliases)
            if location:
                logger.debug(f"Found {binary} for package {package}: {location}")
            else:
                logger.warning(f"Required executable '{binary}' (package {package}) not found")
                missing.append((package, binary))
        return missing
