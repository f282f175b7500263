import pytest

from acsetup.backend.core import setup_operations
from acsetup.backend.core.exceptions import UserAbortError
from acsetup.backend.core.setup_operations import SetupOperations
from acsetup.backend.core.setup_steps import SetupStep
from acsetup.backend.handlers.config_handler import ConfigHandler
from acsetup.backend.services import game_process_service


class RecordingStep(SetupStep):
    def __init__(self, name, shown, calls):
        self.name = name
        self.shown = shown
        self.calls = calls

    def run(self, context, toolkit):
        self.calls.append(self.name)
        return self.shown


@pytest.fixture
def operations(tmp_path, mocker, distribution):
    menu = mocker.Mock()
    menu.ask.return_value = True
    detection = mocker.Mock()
    detection.detect.return_value = distribution
    detection.aliases = {}
    mocker.patch.object(setup_operations, "get_game_processes", return_value=[])
    return SetupOperations(
        menu_handler=menu,
        runner=mocker.Mock(),
        config_handler=ConfigHandler(config_file=tmp_path / "config.json"),
        detection_service=detection,
        home=tmp_path,
    )


class TestPreflight:
    def test_leftover_work_dir_trashed(self, operations, tmp_path):
        work_dir = tmp_path / "temp"
        work_dir.mkdir()
        operations.check_work_dir(work_dir)
        operations.runner.check.assert_called_once_with("gio", "trash", work_dir)

    def test_leftover_work_dir_kept_aborts(self, operations, tmp_path):
        work_dir = tmp_path / "temp"
        work_dir.mkdir()
        operations.menu.ask.return_value = False
        with pytest.raises(UserAbortError):
            operations.check_work_dir(work_dir)
        operations.runner.check.assert_not_called()

    def test_no_work_dir(self, operations, tmp_path):
        operations.check_work_dir(tmp_path / "temp")
        operations.menu.ask.assert_not_called()

    def test_running_game_stopped(self, operations, mocker):
        proc = mocker.Mock(pid=42)
        mocker.patch.object(setup_operations, "get_game_processes", return_value=[proc])
        stop = mocker.patch.object(setup_operations, "stop_processes")
        operations.check_game_running()
        stop.assert_called_once_with([proc])

    def test_running_game_kept_aborts(self, operations, mocker):
        mocker.patch.object(setup_operations, "get_game_processes", return_value=[mocker.Mock(pid=42)])
        operations.menu.ask.return_value = False
        with pytest.raises(UserAbortError):
            operations.check_game_running()


class TestBuildContext:
    def test_native_steam_default_library(self, operations, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        game_dir = tmp_path / ".local" / "share" / "Steam" / "steamapps" / "common" / "assettocorsa"
        game_dir.mkdir(parents=True)

        context = operations.build_context()

        assert context.game_dir == game_dir
        assert context.steam.kind == "native"
        assert context.compatdata_dir == game_dir.parent.parent / "compatdata" / "244210"
        assert context.desktop_entry == tmp_path / ".local" / "share" / "applications" / "Assetto Corsa.desktop"
        assert context.csp_version == "0.2.11"


class TestRunSteps:
    def test_steps_run_in_order(self, operations, setup_context, mocker, capsys):
        calls = []
        steps = [RecordingStep("a", True, calls), RecordingStep("b", False, calls), RecordingStep("c", True, calls)]
        operations.run_steps(setup_context, steps=steps, toolkit=mocker.Mock())
        assert calls == ["a", "b", "c"]
        assert "All done!" in capsys.readouterr().out

    def test_failure_stops_pipeline(self, operations, setup_context, mocker):
        calls = []

        class FailingStep(SetupStep):
            name = "failing"

            def run(self, context, toolkit):
                raise UserAbortError("stop")

        steps = [RecordingStep("a", True, calls), FailingStep(), RecordingStep("c", True, calls)]
        with pytest.raises(UserAbortError):
            operations.run_steps(setup_context, steps=steps, toolkit=mocker.Mock())
        assert calls == ["a"]


class TestGameProcessService:
    def test_get_game_processes(self, mocker):
        game = mocker.Mock(info={"pid": 1, "name": "AssettoCorsa.ex"})
        other = mocker.Mock(info={"pid": 2, "name": "steam"})
        mocker.patch.object(game_process_service.psutil, "process_iter", return_value=[game, other])
        assert game_process_service.get_game_processes() == [game]

    def test_stop_processes_kills_survivors(self, mocker):
        proc = mocker.Mock(pid=1, info={"name": "AssettoCorsa.ex"})
        mocker.patch.object(game_process_service.psutil, "wait_procs", return_value=([], [proc]))
        game_process_service.stop_processes([proc], timeout=0)
        proc.terminate.assert_called_once()
        proc.kill.assert_called_once()
