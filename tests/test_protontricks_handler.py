from pathlib import Path

from acsetup.backend.handlers import protontricks_handler
from acsetup.backend.handlers.protontricks_handler import ProtontricksHandler


class TestDetectProtontricks:
    def test_alias_used_first(self, mocker):
        mocker.patch.object(protontricks_handler.shutil, "which", return_value="/usr/bin/protontricks")
        handler = ProtontricksHandler(mocker.Mock(), aliases={"protontricks": "flatpak run com.github.Matoking.protontricks"})
        assert handler.detect_protontricks() == ["flatpak", "run", "com.github.Matoking.protontricks"]

    def test_native(self, mocker):
        mocker.patch.object(protontricks_handler.shutil, "which", return_value="/usr/bin/protontricks")
        assert ProtontricksHandler(mocker.Mock()).detect_protontricks() == ["protontricks"]

    def test_flatpak_fallback(self, mocker):
        mocker.patch.object(protontricks_handler.shutil, "which", return_value=None)
        assert ProtontricksHandler(mocker.Mock()).detect_protontricks() == [
            "flatpak", "run", "com.github.Matoking.protontricks"
        ]


class TestInstallComponents:
    def test_dxvk_without_background_wineserver(self, mocker):
        mocker.patch.object(protontricks_handler.shutil, "which", return_value="/usr/bin/protontricks")
        runner = mocker.Mock()
        handler = ProtontricksHandler(runner, steam_root=Path("/home/user/.local/share/Steam"))
        handler.install_components("dxvk", background_wineserver=False)

        args, kwargs = runner.check.call_args
        assert list(args) == ["protontricks", "--no-background-wineserver", "244210", "dxvk"]
        assert kwargs["env"]["WINEDEBUG"] == "-all"
        assert kwargs["env"]["STEAM_DIR"] == "/home/user/.local/share/Steam"

    def test_corefonts(self, mocker):
        mocker.patch.object(protontricks_handler.shutil, "which", return_value="/usr/bin/protontricks")
        runner = mocker.Mock()
        ProtontricksHandler(runner).install_components("corefonts")
        assert list(runner.check.call_args[0]) == ["protontricks", "244210", "corefonts"]
