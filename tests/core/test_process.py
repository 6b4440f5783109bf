"""
Tests for external process invocation.
"""

from pathlib import Path
from unittest.mock import Mock, patch

from llvmenv.core.process import (
    EXIT_COMMAND_NOT_FOUND,
    CommandResult,
    SubprocessRunner,
    available_cpu_count,
)


class TestCommandResult:
    def test_ok_and_tool(self):
        result = CommandResult(args=["cmake", "--build", "b"], returncode=0)
        assert result.ok
        assert result.tool == "cmake"

    def test_failure(self):
        assert not CommandResult(args=["git"], returncode=128).ok


class TestSubprocessRunner:
    """Test SubprocessRunner."""

    @patch("llvmenv.core.process.subprocess.run")
    def test_passes_args_and_cwd(self, mock_run, tmp_path):
        mock_run.return_value = Mock(returncode=0, stdout=None, stderr=None)

        result = SubprocessRunner().run(["git", "pull", Path("x")], cwd=tmp_path)

        assert result.ok
        assert result.args == ["git", "pull", "x"]
        call = mock_run.call_args
        assert call.args[0] == ["git", "pull", "x"]
        assert call.kwargs["cwd"] == tmp_path
        assert call.kwargs["env"] is None
        assert call.kwargs["capture_output"] is False

    @patch("llvmenv.core.process.subprocess.run")
    def test_nonzero_exit_returned_not_raised(self, mock_run):
        mock_run.return_value = Mock(returncode=2, stdout="", stderr="boom")

        result = SubprocessRunner(capture=True).run(["cmake", "--build", "b"])

        assert result.returncode == 2
        assert result.stderr == "boom"

    @patch("llvmenv.core.process.subprocess.run")
    def test_missing_tool_maps_to_127(self, mock_run):
        mock_run.side_effect = FileNotFoundError("svn")

        result = SubprocessRunner().run(["svn", "checkout", "url", "dest"])

        assert result.returncode == EXIT_COMMAND_NOT_FOUND
        assert "svn" in result.stderr

    @patch("llvmenv.core.process.subprocess.run")
    def test_environment_layered_over_os_environ(self, mock_run, monkeypatch):
        monkeypatch.setenv("LLVMENV_TEST_EXISTING", "1")
        mock_run.return_value = Mock(returncode=0, stdout="", stderr="")

        SubprocessRunner(base_env={"A": "base"}).run(["cmake"], env={"B": "extra"})

        env = mock_run.call_args.kwargs["env"]
        assert env["A"] == "base"
        assert env["B"] == "extra"
        assert env["LLVMENV_TEST_EXISTING"] == "1"

    def test_real_subprocess(self, tmp_path):
        import sys

        result = SubprocessRunner(capture=True).run(
            [sys.executable, "-c", "import sys; sys.exit(3)"], cwd=tmp_path
        )
        assert result.returncode == 3


def test_available_cpu_count_is_positive():
    assert available_cpu_count() >= 1


@patch("llvmenv.core.process.os")
def test_available_cpu_count_without_affinity(mock_os):
    del mock_os.sched_getaffinity
    mock_os.cpu_count.return_value = None
    assert available_cpu_count() == 1

