#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
acsetup CLI Frontend - Main Entry Point

Command-line interface that runs the interactive Assetto Corsa setup and
turns backend errors into messages and exit codes.
"""

import sys
import argparse
import logging

from acsetup import __version__ as acsetup_version
from acsetup.backend.core.exceptions import CommandFailedError, DownloadError, SetupError
from acsetup.backend.core.setup_operations import SetupOperations
from acsetup.backend.handlers.config_handler import ConfigHandler
from acsetup.backend.handlers.logging_handler import LoggingHandler
from acsetup.backend.handlers.menu_handler import MenuHandler
from acsetup.backend.handlers.subprocess_utils import CommandRunner
from acsetup.shared.colors import COLOR_ERROR, COLOR_INFO, COLOR_RESET, COLOR_WARNING

logger = logging.getLogger(__name__)

REPORT_HINT = "If this is an issue, please report it on Github."
EXIT_INTERRUPTED = 130


def format_command_failure(result) -> str:
    """Error block shown when a guarded command fails."""
    return (
        f"\n{COLOR_ERROR}Encountered an error while running '{result.command_line}' "
        f"at {result.call_site}:{COLOR_RESET}\n"
        f"{result.output.rstrip()}\n\n"
        f"{COLOR_WARNING}{REPORT_HINT}{COLOR_RESET}\n"
    )


def format_operation_failure(description: str, detail: str) -> str:
    return (
        f"\n{COLOR_ERROR}Encountered an error while {description}:{COLOR_RESET}\n"
        f"{detail}\n\n"
        f"{COLOR_WARNING}{REPORT_HINT}{COLOR_RESET}\n"
    )


class AcSetupCLI:
    """Main application class for the acsetup CLI frontend"""

    def __init__(self, argv=None, operations=None):
        self.args = self._parse_args(argv)
        self.log_file = self._configure_logging()
        self.operations = operations

    def _parse_args(self, argv):
        parser = argparse.ArgumentParser(
            prog="acsetup",
            description="Set up Assetto Corsa with Proton, Content Manager and CSP on Linux"
        )
        parser.add_argument("-V", "--version", action="version", version=f"acsetup {acsetup_version}")
        parser.add_argument("-d", "--debug", action="store_true", help="Enable debug logging (implies verbose)")
        parser.add_argument("-v", "--verbose", action="store_true", help="Enable informational console output")
        return parser.parse_args(argv)

    def _configure_logging(self):
        """Per-run rotated log file plus a console handler at the requested level."""
        if self.args.debug:
            console_level = logging.DEBUG
        elif self.args.verbose:
            console_level = logging.INFO
        else:
            console_level = logging.ERROR

        logging_handler = LoggingHandler()
        logging_handler.rotate_log_for_logger()
        logging_handler.setup_logger('acsetup', console_level=console_level)
        return logging_handler.log_file

    def _create_operations(self):
        return SetupOperations(
            menu_handler=MenuHandler(),
            runner=CommandRunner(),
            config_handler=ConfigHandler(),
        )

    def run(self) -> int:
        logger.info(f"acsetup {acsetup_version} starting")
        try:
            operations = self.operations or self._create_operations()
            operations.run()
        except KeyboardInterrupt:
            print(f"\n{COLOR_INFO}Exiting...{COLOR_RESET}")
            logger.info("Interrupted by user")
            return EXIT_INTERRUPTED
        except CommandFailedError as e:
            print(format_command_failure(e.result))
            return e.exit_code
        except DownloadError as e:
            print(format_operation_failure(f"downloading '{e.url}'", e.reason))
            return e.exit_code
        except SetupError as e:
            logger.warning(f"Setup stopped: {e.message}")
            if e.message:
                print(e.message)
            return e.exit_code
        except OSError as e:
            logger.warning(f"File operation failed: {e}", exc_info=True)
            print(format_operation_failure("changing files", str(e)))
            return 1
        logger.info("acsetup finished successfully")
        return 0


def main(argv=None) -> int:
    """Console script entry point."""
    return AcSetupCLI(argv).run()


if __name__ == "__main__":
    sys.exit(main())
