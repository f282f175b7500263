"""
Setup Operations

Drives a complete run: environment checks, path resolution, pre-flight
checks and the ordered optional steps.
"""

import logging
from pathlib import Path
from typing import List, Optional

from .exceptions import UserAbortError
from .setup_steps import SetupStep, SetupToolkit, default_steps
from ..data.game_data import DESKTOP_ENTRY_NAME
from ..handlers.filesystem_handler import FileSystemHandler
from ..handlers.path_handler import PathHandler
from ..handlers.protontricks_handler import ProtontricksHandler
from ..handlers.shortcut_handler import ShortcutHandler
from ..models.configuration import SetupContext
from ..services.distribution_detection_service import DistributionDetectionService
from ..services.game_process_service import get_game_processes, stop_processes
from ...shared.colors import bold

logger = logging.getLogger(__name__)


class SetupOperations:
    """
    Builds the SetupContext and runs the step pipeline against it.
    """

    def __init__(self, menu_handler, runner, config_handler,
                 detection_service: Optional[DistributionDetectionService] = None,
                 home: Optional[Path] = None):
        self.menu = menu_handler
        self.runner = runner
        self.config = config_handler
        self.detection_service = detection_service or DistributionDetectionService(home=home)
        self.home = Path(home) if home else Path.home()
        self.filesystem = FileSystemHandler(runner)
        self.path_handler = PathHandler(menu_handler, home=self.home)

    # --- Pre-flight -------------------------------------------------------
    def check_work_dir(self, work_dir: Path) -> None:
        """A leftover work dir from an earlier run must be moved out of the way."""
        if not work_dir.exists():
            return
        print(f"'{work_dir}/' directory found inside current directory. "
              "It needs to be removed or renamed for this script to work.")
        if not self.menu.ask(f"Move '{work_dir}/' to trash?"):
            raise UserAbortError(f"'{work_dir}/' was not removed, aborting.")
        self.filesystem.move_to_trash(work_dir)

    def check_game_running(self) -> None:
        processes = get_game_processes()
        if not processes:
            return
        logger.info(f"Assetto Corsa is running: {[p.pid for p in processes]}")
        if not self.menu.ask("Assetto Corsa is running. Stop Assetto Corsa to proceed?"):
            raise UserAbortError("Assetto Corsa is still running, aborting.")
        stop_processes(processes)

    def build_context(self) -> SetupContext:
        """Run the environment checks and resolve every path."""
        distribution = self.detection_service.detect()
        work_dir = self.config.get_work_dir()
        self.check_work_dir(work_dir)

        steam = self.path_handler.resolve_steam_installation()
        game_dir = self.path_handler.resolve_game_dir(steam)

        context = SetupContext(
            distribution=distribution,
            steam=steam,
            game_dir=game_dir,
            desktop_entry=self.home / ".local" / "share" / "applications" / DESKTOP_ENTRY_NAME,
            mimeapps_list=self.home / ".config" / "mimeapps.list",
            work_dir=work_dir,
            backup_dir=self.config.get_backup_dir(),
            proton_ge_version=self.config.get_proton_ge_version(),
            csp_version=self.config.get_csp_version(),
        )
        logger.debug(f"Setup context: {context.to_dict()}")

        self.check_game_running()
        return context

    def build_toolkit(self, context: SetupContext) -> SetupToolkit:
        return SetupToolkit(
            menu=self.menu,
            runner=self.runner,
            filesystem=self.filesystem,
            protontricks=ProtontricksHandler(self.runner, steam_root=context.steam.root,
                                             aliases=self.detection_service.aliases),
            shortcuts=ShortcutHandler(self.runner, context.desktop_entry, context.mimeapps_list),
        )

    # --- Pipeline -----------------------------------------------------------
    def run_steps(self, context: SetupContext, steps: Optional[List[SetupStep]] = None,
                  toolkit: Optional[SetupToolkit] = None) -> None:
        """Run each step in order; exceptions from a step end the run."""
        toolkit = toolkit or self.build_toolkit(context)
        print()
        for step in (steps if steps is not None else default_steps()):
            logger.info(f"Running step '{step.name}'")
            if step.run(context, toolkit):
                print()
        print(bold("All done!"))
        logger.info("All steps finished")

    def run(self) -> None:
        context = self.build_context()
        self.run_steps(context)
