"""
Static data about Assetto Corsa, Steam and the add-ons acsetup installs.

Versions here are the defaults; ConfigHandler may override them.
"""

APP_ID = "244210"
GAME_DIR_NAME = "assettocorsa"

# Linux truncates process names to 15 characters
GAME_PROCESS_NAME = "AssettoCorsa.ex"

GAME_EXE = "AssettoCorsa.exe"
ORIGINAL_GAME_EXE = "AssettoCorsa_original.exe"
CONTENT_MANAGER_EXE = "Content Manager.exe"

DEFAULT_PROTON_GE_VERSION = "9-20"
DEFAULT_CSP_VERSION = "0.2.11"

FLATPAK_STEAM_APP_ID = "com.valvesoftware.Steam"
FLATPAK_PROTONTRICKS_APP_ID = "com.github.Matoking.protontricks"

PROTON_GE_URL = (
    "https://github.com/GloriousEggroll/proton-ge-custom/releases/download/"
    "GE-Proton{version}/GE-Proton{version}.tar.gz"
)
CONTENT_MANAGER_URL = "https://acstuff.club/app/latest.zip"
CONTENT_MANAGER_FONTS_URL = "https://files.acstuff.ru/shared/T0Zj/fonts.zip"
CSP_URL = "https://acstuff.club/patch/?get={version}"

ISSUES_URL = "https://github.com/sihawido/assettocorsa-linux-setup/issues"

DESKTOP_ENTRY_NAME = "Assetto Corsa.desktop"
DESKTOP_STEAM_LAUNCH = f"steam steam://rungameid/{APP_ID}"
ACMANAGER_MIME_TYPE = "x-scheme-handler/acmanager"

CSP_MANIFEST_KEY = "SHADERS_PATCH"
CSP_WINE_MAPPING_SECTION = "[NAMES_WINE]"

REG_D3D11_OVERRIDE = '"*d3d11"="native"'
REG_DWRITE_OVERRIDE = '"dwrite"="native,builtin"'
