"""
Optional setup steps.

Each step inspects the current state of the game and prefix, asks the user
whether to act and performs the change. Steps keep no state of their own:
whether something is "already installed" is worked out from the files on
disk every run, which is also what makes re-running a step safe.
"""

import logging
from dataclasses import dataclass
from typing import List

from .exceptions import BackupConflictError, PrefixNotGeneratedError
from ..data.game_data import (
    CONTENT_MANAGER_EXE, CONTENT_MANAGER_FONTS_URL, CONTENT_MANAGER_URL,
    CSP_MANIFEST_KEY, CSP_URL, CSP_WINE_MAPPING_SECTION, DESKTOP_STEAM_LAUNCH,
    PROTON_GE_URL, REG_D3D11_OVERRIDE, REG_DWRITE_OVERRIDE,
)
from ..handlers.ini_handler import get_ini_value, has_line_containing, truncate_from_section
from ..handlers.wine_utils import WineUtils
from ..models.configuration import SetupContext
from ...shared.colors import bold

logger = logging.getLogger(__name__)


@dataclass
class SetupToolkit:
    """Handlers the steps act through."""
    menu: object
    runner: object
    filesystem: object
    protontricks: object
    shortcuts: object


class SetupStep:
    """
    One optional step of the pipeline.

    run() returns True when the step showed something to the user, so the
    pipeline can separate steps with a blank line.
    """
    name = "step"

    def run(self, context: SetupContext, toolkit: SetupToolkit) -> bool:
        raise NotImplementedError


class StartMenuShortcutStep(SetupStep):
    name = "start-menu-shortcut"

    def run(self, context, toolkit):
        shortcut = context.start_menu_shortcut
        if not shortcut.is_file():
            return False
        print("Start Menu Shortcut for Content Manager found. This might be causing crashes on start-up.")
        if toolkit.menu.ask("Delete the shortcut?"):
            toolkit.filesystem.delete_file(shortcut)
        return True


class ProtonGEStep(SetupStep):
    name = "proton-ge"

    def display_name(self, context) -> str:
        return f"ProtonGE {context.proton_ge_version}"

    def prompt(self, context) -> str:
        verb = "Reinstall" if context.proton_ge_dir.is_dir() else "Install"
        return f"{verb} {self.display_name(context)}?"

    def run(self, context, toolkit):
        print(f"{self.display_name(context)} is the latest tested version that works. "
              "Using any other version may not work.")
        if toolkit.menu.ask(self.prompt(context)):
            self.install(context, toolkit)
        return True

    def install(self, context, toolkit):
        fs = toolkit.filesystem
        display_name = self.display_name(context)
        archive = context.work_dir / f"{context.proton_ge_name}.tar.gz"

        print(f"Downloading {display_name}...")
        fs.download_file(PROTON_GE_URL.format(version=context.proton_ge_version), archive)

        if context.proton_ge_dir.is_dir():
            print(f"Removing previous installation of {display_name}...")
            fs.delete_directory(context.proton_ge_dir)

        print(f"Installing {display_name}...")
        context.compat_tools_dir.mkdir(parents=True, exist_ok=True)
        fs.extract_tar_gz(archive, context.work_dir)
        fs.copy_directory(context.work_dir / context.proton_ge_name, context.proton_ge_dir)
        fs.delete_directory(context.work_dir)

        print(bold(
            f"To enable ProtonGE for Assetto Corsa:\n"
            f" 1. Restart Steam\n"
            f" 2. Go to Assetto Corsa > Properties > Compatibility\n"
            f" 3. Turn on 'Force the use of a specific Steam Play compatibility tool'\n"
            f" 4. From the drop-down, select {display_name}."
        ))


class WineprefixResetStep(SetupStep):
    name = "wineprefix-reset"

    def run(self, context, toolkit):
        if not context.prefix_dir.is_dir():
            return False
        print("Found existing Wineprefix, deleting it may solve AC not launching/crashing.")
        if toolkit.menu.ask("Delete existing Wineprefix and Content Manager? "
                            "(preserves configs, presets and mods)"):
            self.reset(context, toolkit)
        return True

    @staticmethod
    def _config_dirs(context):
        return [("AC", context.ac_config_dir), ("CM", context.cm_config_dir)]

    def reset(self, context, toolkit):
        fs = toolkit.filesystem
        backup_dir = context.backup_dir

        if backup_dir.exists():
            print(f"Found previous save of AC and CM configs in {bold(str(backup_dir.resolve()))}.")
            if not toolkit.menu.ask("Delete previous saves to proceed?"):
                raise BackupConflictError("Previous config backup was kept, aborting.")
            fs.delete_directory(backup_dir)

        backup_dir.mkdir(parents=True)
        saved = 0
        for label, config_dir in self._config_dirs(context):
            if config_dir.is_dir():
                print(f"Saving {label} configs and presets...")
                fs.copy_directory(config_dir, backup_dir / config_dir.name)
                saved += 1

        if context.prefix_dir.is_dir():
            print("Deleting Wineprefix...")
            fs.delete_directory(context.compatdata_dir)

        restored = 0
        for label, config_dir in self._config_dirs(context):
            saved_dir = backup_dir / config_dir.name
            if saved_dir.is_dir():
                print(f"Copying saved {label} configs and presets...")
                fs.copy_directory(saved_dir, config_dir)
                restored += 1

        # Only drop the backup once everything in it is back in place
        if restored == saved:
            fs.delete_directory(backup_dir)
        else:
            logger.warning(f"Restored {restored} of {saved} config directories, keeping {backup_dir}")

        if context.original_game_exe.is_file():
            print("Deleting Content Manager...")
            if context.game_exe.exists():
                fs.delete_file(context.game_exe)
            fs.move_file(context.original_game_exe, context.game_exe)


class GeneratedFilesStep(SetupStep):
    """Stops the run until the prefix has been created by a first launch."""
    name = "generated-files"

    def run(self, context, toolkit):
        if context.prefix_steam_config_dir.is_dir():
            return False
        raise PrefixNotGeneratedError(bold(
            "Before proceeding, please do the following to generate the wineprefix:\n"
            f" 1. Launch Assetto Corsa with Proton-GE {context.proton_ge_version}\n"
            " 2. Wait until Assetto Corsa launches (it takes a while)\n"
            " 3. Exit Assetto Corsa\n"
            "Then start the script again, and skip the step relating to deleting the wineprefix."
        ))


class ContentManagerStep(SetupStep):
    name = "content-manager"

    def prompt(self, context) -> str:
        verb = "Reinstall" if context.original_game_exe.is_file() else "Install"
        return f"{verb} Content Manager?"

    def run(self, context, toolkit):
        if toolkit.menu.ask(self.prompt(context)):
            self.install(context, toolkit)
        return True

    def install(self, context, toolkit):
        fs = toolkit.filesystem
        work_dir = context.work_dir

        print("Installing Content Manager...")
        archive = fs.download_file(CONTENT_MANAGER_URL, work_dir / "latest.zip")
        fs.extract_zip(archive, work_dir)
        if context.game_exe.exists():
            fs.move_file(context.game_exe, context.original_game_exe, overwrite=False)
        fs.delete_file(archive)
        fs.copy_directory_contents(work_dir, context.game_dir)
        fs.delete_directory(work_dir)
        fs.move_file(context.game_dir / CONTENT_MANAGER_EXE, context.game_exe)

        print("Installing fonts required for Content Manager...")
        fonts_archive = fs.download_file(CONTENT_MANAGER_FONTS_URL, work_dir / "fonts.zip")
        fs.extract_zip(fonts_archive, work_dir, overwrite=True)
        fs.delete_file(fonts_archive)
        fs.copy_directory(work_dir / "system", context.fonts_dir / "system")
        fs.delete_directory(work_dir)

        print("Creating symlink...")
        fs.force_symlink(context.steam.login_users_vdf,
                         context.prefix_steam_config_dir / "loginusers.vdf")

        self.setup_uri_handler(context, toolkit)
        print(f"When starting Content Manager, set the root Assetto Corsa folder to {bold('Z:' + str(context.game_dir))}")

    @staticmethod
    def setup_uri_handler(context, toolkit):
        shortcuts = toolkit.shortcuts
        if not shortcuts.desktop_entry_exists():
            logger.warning(f"No desktop entry at {context.desktop_entry}")
            print("Assetto Corsa does not have a .desktop shortcut, URI links to CM will not work.")
            return

        shortcuts.clean_mime_associations()
        print("Adding ability to open acmanager links...")
        shortcuts.rewrite_launch_command(DESKTOP_STEAM_LAUNCH, context.steam.launch_command)
        shortcuts.register_uri_handler()
        print(f"Opening {bold('acmanager://')} links will only work if Content Manager/Assetto Corsa is not open already.")


class CSPStep(SetupStep):
    name = "csp"

    @staticmethod
    def installed_version(context):
        return get_ini_value(context.csp_manifest, CSP_MANIFEST_KEY)

    def prompt(self, context) -> str:
        if self.installed_version(context) == context.csp_version:
            return f"Reinstall CSP v{context.csp_version}?"
        return f"Install CSP (Custom Shaders Patch) v{context.csp_version}?"

    def run(self, context, toolkit):
        if toolkit.menu.ask(self.prompt(context)):
            self.install(context, toolkit)
        return True

    def install(self, context, toolkit):
        fs = toolkit.filesystem
        work_dir = context.work_dir

        if WineUtils.registry_contains(context.user_reg, "dwrite"):
            print("DLL override 'dwrite' already exists.")
        else:
            print("Adding DLL override 'dwrite'...")
            WineUtils.add_dll_override(context.user_reg, "dwrite", REG_DWRITE_OVERRIDE, REG_D3D11_OVERRIDE)

        print("Downloading CSP...")
        archive = fs.download_file(CSP_URL.format(version=context.csp_version),
                                   work_dir / f"lights-patch-v{context.csp_version}.zip")
        print("Installing CSP...")
        fs.extract_zip(archive, work_dir, overwrite=True)
        fs.delete_file(archive)
        fs.copy_directory_contents(work_dir, context.game_dir)
        fs.delete_directory(work_dir)

        print("Installing fonts required for CSP... (this might take a while)")
        toolkit.protontricks.install_components("corefonts")


class CSPInputMappingStep(SetupStep):
    name = "csp-input-mapping"

    def run(self, context, toolkit):
        if not has_line_containing(context.csp_alt_mapping, CSP_WINE_MAPPING_SECTION):
            return False
        print("Resolve some input mapping issues?")
        if toolkit.menu.ask("(Only do this step if you have issues mapping your inputs)"):
            truncate_from_section(context.csp_alt_mapping, CSP_WINE_MAPPING_SECTION)
        return True


class DXVKStep(SetupStep):
    name = "dxvk"

    def run(self, context, toolkit):
        if toolkit.menu.ask("Install DXVK? (can improve performance in some cases)"):
            print("Installing DXVK...")
            toolkit.protontricks.install_components("dxvk", background_wineserver=False)
        return True


def default_steps() -> List[SetupStep]:
    """The pipeline in the order it runs."""
    return [
        StartMenuShortcutStep(),
        ProtonGEStep(),
        WineprefixResetStep(),
        GeneratedFilesStep(),
        ContentManagerStep(),
        CSPStep(),
        CSPInputMappingStep(),
        DXVKStep(),
    ]
