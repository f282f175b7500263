"""
Configuration Data Models

Immutable records produced by the environment probe and path resolver and
passed into every setup step.
"""

from pathlib import Path
from typing import Dict, Any, Tuple
from dataclasses import dataclass, field

from ..data.game_data import (
    APP_ID, DEFAULT_CSP_VERSION, DEFAULT_PROTON_GE_VERSION, FLATPAK_STEAM_APP_ID,
    GAME_DIR_NAME, GAME_EXE, ORIGINAL_GAME_EXE,
)

STEAM_NATIVE = "native"
STEAM_FLATPAK = "flatpak"


@dataclass(frozen=True)
class DistributionInfo:
    """Host distribution resolved to a package manager and package list."""
    id: str
    name: str
    family: str
    install_command: str
    required_packages: Tuple[str, ...]
    id_like: str = "undefined"

    def install_hint(self, package: str) -> str:
        return f"sudo {self.install_command} {package}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'id_like': self.id_like,
            'family': self.family,
            'install_command': self.install_command,
            'required_packages': list(self.required_packages),
        }


@dataclass(frozen=True)
class SteamInstallation:
    """The Steam installation in use, either native or Flatpak."""
    kind: str
    root: Path

    def __post_init__(self):
        if self.kind not in (STEAM_NATIVE, STEAM_FLATPAK):
            raise ValueError(f"Invalid Steam installation kind '{self.kind}'")
        if isinstance(self.root, str):
            object.__setattr__(self, 'root', Path(self.root))

    @property
    def launch_command(self) -> str:
        """Command line used by the desktop entry to start the game."""
        if self.kind == STEAM_FLATPAK:
            return f"flatpak run {FLATPAK_STEAM_APP_ID} -applaunch {APP_ID} %u"
        return f"steam -applaunch {APP_ID} %u"

    @property
    def compat_tools_dir(self) -> Path:
        return self.root / "compatibilitytools.d"

    @property
    def library_folders_vdf(self) -> Path:
        return self.root / "steamapps" / "libraryfolders.vdf"

    @property
    def default_game_dir(self) -> Path:
        return self.root / "steamapps" / "common" / GAME_DIR_NAME

    @property
    def login_users_vdf(self) -> Path:
        return self.root / "config" / "loginusers.vdf"


@dataclass(frozen=True)
class SetupContext:
    """Everything a setup step needs to know about this machine.

    Built once per run; all paths inside the Wine prefix are derived from
    the game directory so a game in a secondary Steam library gets the
    compatdata of that library.
    """
    distribution: DistributionInfo
    steam: SteamInstallation
    game_dir: Path
    desktop_entry: Path
    mimeapps_list: Path
    work_dir: Path = field(default_factory=lambda: Path("temp"))
    backup_dir: Path = field(default_factory=lambda: Path("ac_configs"))
    proton_ge_version: str = DEFAULT_PROTON_GE_VERSION
    csp_version: str = DEFAULT_CSP_VERSION

    def __post_init__(self):
        for name in ('game_dir', 'desktop_entry', 'mimeapps_list', 'work_dir', 'backup_dir'):
            value = getattr(self, name)
            if isinstance(value, str):
                object.__setattr__(self, name, Path(value))

    # --- Steam library -------------------------------------------------
    @property
    def steamapps_dir(self) -> Path:
        # <library>/steamapps/common/assettocorsa -> <library>/steamapps;
        # a game dir outside a "common" folder is left as is
        if self.game_dir.parent.name == "common":
            return self.game_dir.parent.parent
        return self.game_dir

    @property
    def compatdata_dir(self) -> Path:
        return self.steamapps_dir / "compatdata" / APP_ID

    @property
    def compat_tools_dir(self) -> Path:
        return self.steam.compat_tools_dir

    @property
    def proton_ge_name(self) -> str:
        return f"GE-Proton{self.proton_ge_version}"

    @property
    def proton_ge_dir(self) -> Path:
        return self.compat_tools_dir / self.proton_ge_name

    # --- Wine prefix -----------------------------------------------------
    @property
    def prefix_dir(self) -> Path:
        return self.compatdata_dir / "pfx"

    @property
    def user_reg(self) -> Path:
        return self.prefix_dir / "user.reg"

    @property
    def drive_c(self) -> Path:
        return self.prefix_dir / "drive_c"

    @property
    def steamuser_dir(self) -> Path:
        return self.drive_c / "users" / "steamuser"

    @property
    def ac_config_dir(self) -> Path:
        return self.steamuser_dir / "Documents" / "Assetto Corsa"

    @property
    def cm_config_dir(self) -> Path:
        return self.steamuser_dir / "AppData" / "Local" / "AcTools Content Manager"

    @property
    def start_menu_shortcut(self) -> Path:
        return (self.steamuser_dir / "AppData" / "Roaming" / "Microsoft" / "Windows"
                / "Start Menu" / "Programs" / "Content Manager.lnk")

    @property
    def prefix_steam_config_dir(self) -> Path:
        return self.drive_c / "Program Files (x86)" / "Steam" / "config"

    # --- Game directory --------------------------------------------------
    @property
    def game_exe(self) -> Path:
        return self.game_dir / GAME_EXE

    @property
    def original_game_exe(self) -> Path:
        return self.game_dir / ORIGINAL_GAME_EXE

    @property
    def fonts_dir(self) -> Path:
        return self.game_dir / "content" / "fonts"

    @property
    def csp_manifest(self) -> Path:
        return self.game_dir / "extension" / "config" / "data_manifest.ini"

    @property
    def csp_alt_mapping(self) -> Path:
        return self.game_dir / "extension" / "config" / "data_alt_mapping.ini"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (used for debug logging)."""
        return {
            'distribution': self.distribution.to_dict(),
            'steam_kind': self.steam.kind,
            'steam_root': str(self.steam.root),
            'game_dir': str(self.game_dir),
            'compatdata_dir': str(self.compatdata_dir),
            'desktop_entry': str(self.desktop_entry),
            'work_dir': str(self.work_dir),
            'backup_dir': str(self.backup_dir),
            'proton_ge_version': self.proton_ge_version,
            'csp_version': self.csp_version,
        }
