"""
Tests for the checkout/fetch/build pipeline.

All external tools go through RecordingRunner, so these tests check the
commands the pipeline would run and the state it leaves on disk.
"""

from pathlib import Path

import pytest

from llvmenv.build.executor import BuildExecutor
from llvmenv.build.registry import BuildRegistry
from llvmenv.config.entry import (
    ArchiveSource,
    BuildOptions,
    Entry,
    GitSource,
    LocalSource,
    SvnSource,
    Tool,
)
from llvmenv.core.exceptions import (
    BuildFailed,
    CheckoutFailed,
    ConfigError,
    FetchFailed,
)
from tests.utils import RecordingRunner


@pytest.fixture
def executor(root, runner):
    return BuildExecutor(root, runner=runner)


@pytest.fixture
def git_entry():
    return Entry("llvm-main", GitSource("https://example.com/llvm.git", "main"))


@pytest.fixture
def local_source(tmp_path) -> Path:
    source = tmp_path / "checkouts" / "llvm"
    source.mkdir(parents=True)
    (source / "CMakeLists.txt").write_text("project(LLVM)")
    return source


class TestLayout:
    def test_remote_entry_directories(self, root, executor, git_entry):
        assert executor.source_dir(git_entry) == root / ".src" / "llvm-main"
        assert executor.build_dir(git_entry) == root / ".build" / "llvm-main"
        assert executor.prefix(git_entry) == root / "llvm-main"

    def test_local_entry_uses_declared_path(self, executor, local_source):
        entry = Entry("mine", LocalSource(local_source))
        assert executor.source_dir(entry) == local_source

    def test_source_subdir(self, root, executor):
        entry = Entry("mono", GitSource("u"), BuildOptions(source_subdir="llvm"))
        assert executor.configure_source_dir(entry) == root / ".src" / "mono" / "llvm"


class TestCheckout:
    """Test BuildExecutor.checkout."""

    def test_git_clone(self, root, executor, runner, git_entry):
        assert executor.checkout(git_entry) is True

        dest = root / ".src" / "llvm-main"
        assert runner.calls == [
            (
                ["git", "clone", "-b", "main", "https://example.com/llvm.git", str(dest)],
                root / ".src",
            )
        ]
        assert dest.is_dir()

    def test_svn_checkout(self, root, executor, runner):
        entry = Entry("llvm-svn", SvnSource("https://svn.example.com/llvm/trunk"))
        executor.checkout(entry)
        assert runner.commands == [
            ["svn", "checkout", "https://svn.example.com/llvm/trunk", str(root / ".src" / "llvm-svn")]
        ]

    def test_existing_source_is_left_alone(self, root, executor, runner, git_entry):
        source = root / ".src" / "llvm-main"
        source.mkdir(parents=True)
        (source / "local-change.patch").write_text("keep me")

        assert executor.checkout(git_entry) is False

        assert runner.calls == []
        assert (source / "local-change.patch").read_text() == "keep me"

    def test_checkout_twice_clones_once(self, executor, runner, git_entry):
        executor.checkout(git_entry)
        executor.checkout(git_entry)
        assert runner.tools() == ["git clone"]

    def test_clone_failure(self, root, executor, runner, git_entry):
        runner.fail_on(["git", "clone"], returncode=128, stderr="fatal: repository not found")

        with pytest.raises(CheckoutFailed) as exc_info:
            executor.checkout(git_entry)

        error = exc_info.value
        assert error.entry == "llvm-main"
        assert error.tool == "git"
        assert error.returncode == 128
        assert "repository not found" in str(error)
        assert not (root / ".src" / "llvm-main").exists()

    def test_missing_tool_binary(self, executor, runner, git_entry):
        runner.fail_on(["git"], returncode=127)
        with pytest.raises(CheckoutFailed) as exc_info:
            executor.checkout(git_entry)
        assert exc_info.value.returncode == 127

    def test_local_source_needs_no_commands(self, executor, runner, local_source):
        entry = Entry("mine", LocalSource(local_source))
        assert executor.checkout(entry) is False
        assert runner.calls == []

    def test_missing_local_source(self, tmp_path, executor):
        entry = Entry("mine", LocalSource(tmp_path / "nowhere"))
        with pytest.raises(CheckoutFailed, match="does not exist"):
            executor.checkout(entry)

    def test_tools_cloned_into_source_tree(self, root, executor, runner):
        entry = Entry(
            "llvm-old",
            SvnSource("https://svn.example.com/llvm/trunk"),
            tools=(
                Tool("clang", SvnSource("https://svn.example.com/cfe/trunk")),
                Tool(
                    "compiler-rt",
                    GitSource("https://example.com/compiler-rt.git"),
                    relative_path="projects/compiler-rt",
                ),
            ),
        )

        executor.checkout(entry)

        source = root / ".src" / "llvm-old"
        assert runner.commands == [
            ["svn", "checkout", "https://svn.example.com/llvm/trunk", str(source)],
            ["svn", "checkout", "https://svn.example.com/cfe/trunk", str(source / "tools" / "clang")],
            ["git", "clone", "https://example.com/compiler-rt.git", str(source / "projects" / "compiler-rt")],
        ]

    def test_missing_tool_checked_out_into_existing_source(self, root, executor, runner):
        entry = Entry("llvm-old", GitSource("u"), tools=(Tool("clang", GitSource("c")),))
        (root / ".src" / "llvm-old").mkdir(parents=True)

        assert executor.checkout(entry) is True
        assert runner.commands == [["git", "clone", "c", str(root / ".src" / "llvm-old" / "tools" / "clang")]]

    def test_archive_source(self, root, executor, runner, monkeypatch):
        calls = []

        def fake_download(url, destination, expected_sha256=None):
            calls.append((url, destination, expected_sha256))
            return destination

        def fake_extract(archive, destination):
            (destination / "llvm").mkdir(parents=True)
            return destination

        monkeypatch.setattr("llvmenv.sources.archive.download_file", fake_download)
        monkeypatch.setattr("llvmenv.sources.archive.extract_source_archive", fake_extract)

        entry = Entry("llvm-17", ArchiveSource("https://example.com/llvm-17.src.tar.xz", "abc"))
        executor.checkout(entry)

        assert calls == [
            ("https://example.com/llvm-17.src.tar.xz", root / ".downloads" / "llvm-17.src.tar.xz", "abc")
        ]
        assert (root / ".src" / "llvm-17" / "llvm").is_dir()
        assert runner.calls == []


class TestFetch:
    """Test BuildExecutor.fetch."""

    def test_git_pull(self, root, executor, runner, git_entry):
        source = root / ".src" / "llvm-main"
        source.mkdir(parents=True)

        executor.fetch(git_entry)

        assert runner.calls == [(["git", "pull", "origin", "main"], source)]

    def test_git_pull_without_branch(self, root, executor, runner):
        entry = Entry("llvm", GitSource("u"))
        (root / ".src" / "llvm").mkdir(parents=True)
        executor.fetch(entry)
        assert runner.commands == [["git", "pull"]]

    def test_svn_update_with_tools(self, root, executor, runner):
        entry = Entry("old", SvnSource("u"), tools=(Tool("clang", SvnSource("c")),))
        (root / ".src" / "old" / "tools" / "clang").mkdir(parents=True)

        executor.fetch(entry)

        assert runner.calls == [
            (["svn", "update"], root / ".src" / "old"),
            (["svn", "update"], root / ".src" / "old" / "tools" / "clang"),
        ]

    def test_fetch_before_checkout(self, executor, runner, git_entry):
        with pytest.raises(CheckoutFailed):
            executor.fetch(git_entry)
        assert runner.calls == []

    def test_fetch_failure(self, root, executor, runner, git_entry):
        (root / ".src" / "llvm-main").mkdir(parents=True)
        runner.fail_on(["git", "pull"], returncode=1, stderr="CONFLICT (content)")

        with pytest.raises(FetchFailed) as exc_info:
            executor.fetch(git_entry)
        assert exc_info.value.stage == "fetch"
        assert exc_info.value.returncode == 1

    def test_local_source_is_not_touched(self, executor, runner, local_source):
        executor.fetch(Entry("mine", LocalSource(local_source)))
        assert runner.calls == []


class TestBuild:
    """Test BuildExecutor.build."""

    def test_configure_compile_install(self, root, executor, runner, local_source):
        entry = Entry("mine", LocalSource(local_source), BuildOptions(build_type="Debug"))

        build = executor.build(entry, nproc=4)

        build_dir = root / ".build" / "mine"
        prefix = root / "mine"
        assert runner.commands == [
            [
                "cmake", "-S", str(local_source), "-B", str(build_dir),
                f"-DCMAKE_INSTALL_PREFIX={prefix}",
                "-DCMAKE_BUILD_TYPE=Debug",
            ],
            ["cmake", "--build", str(build_dir), "--parallel", "4"],
            ["cmake", "--install", str(build_dir), "--prefix", str(prefix)],
        ]
        assert build.prefix == prefix
        assert build.is_complete
        assert BuildRegistry(root).find("mine") == build

    def test_default_jobs(self, executor, runner, local_source, monkeypatch):
        monkeypatch.setattr("llvmenv.build.executor.available_cpu_count", lambda: 6)
        executor.build(Entry("mine", LocalSource(local_source)))
        assert runner.commands[1][-1] == "6"

    @pytest.mark.parametrize("nproc", [0, -2])
    def test_invalid_jobs(self, executor, runner, local_source, nproc):
        with pytest.raises(ValueError):
            executor.build(Entry("mine", LocalSource(local_source)), nproc=nproc)
        assert runner.calls == []

    @pytest.mark.parametrize("name", ["default-build", "entries.yaml"])
    def test_reserved_name_is_refused(self, root, executor, runner, local_source, name):
        with pytest.raises(ConfigError, match="reserved"):
            executor.build(Entry(name, LocalSource(local_source)), nproc=1)
        assert runner.calls == []
        assert not (root / name).exists()
        assert not (root / ".build" / name).exists()

    @pytest.mark.parametrize(
        "prefix,stage,ran",
        [
            (["cmake", "-S"], "configure", 1),
            (["cmake", "--build"], "compile", 2),
            (["cmake", "--install"], "install", 3),
        ],
    )
    def test_stage_failure_stops_pipeline(
        self, root, executor, runner, local_source, prefix, stage, ran
    ):
        runner.fail_on(prefix, returncode=2)

        with pytest.raises(BuildFailed) as exc_info:
            executor.build(Entry("mine", LocalSource(local_source)), nproc=1)

        assert exc_info.value.stage == stage
        assert exc_info.value.tool == "cmake"
        assert exc_info.value.returncode == 2
        assert len(runner.calls) == ran
        assert BuildRegistry(root).find("mine") is None

    def test_failed_rebuild_leaves_build_incomplete(self, root, executor, runner, local_source):
        entry = Entry("mine", LocalSource(local_source))
        assert executor.build(entry, nproc=1).is_complete

        runner.fail_on(["cmake", "--build"], returncode=1)
        with pytest.raises(BuildFailed):
            executor.build(entry, nproc=1)

        build = BuildRegistry(root).find("mine")
        assert build is not None
        assert not build.is_complete

    def test_build_directory_reused(self, root, executor, local_source):
        entry = Entry("mine", LocalSource(local_source))
        executor.build(entry, nproc=1)
        marker = root / ".build" / "mine" / "CMakeCache.txt"
        marker.write_text("cached")

        executor.build(entry, nproc=1)

        assert marker.read_text() == "cached"

    def test_clean_removes_build_directory(self, root, executor, local_source):
        entry = Entry("mine", LocalSource(local_source))
        executor.build(entry, nproc=1)
        marker = root / ".build" / "mine" / "CMakeCache.txt"
        marker.write_text("cached")

        executor.build(entry, nproc=1, clean=True)

        assert not marker.exists()
        assert (root / ".build" / "mine").is_dir()

    def test_prefix_created_even_if_install_is_empty(self, root, local_source):
        executor = BuildExecutor(root, runner=RecordingRunner(simulate=False))
        executor.build(Entry("mine", LocalSource(local_source)), nproc=1)
        assert (root / "mine").is_dir()

    def test_cmake_options_forwarded(self, executor, runner, local_source):
        options = BuildOptions(
            generator="ninja",
            targets=("X86",),
            options=(("LLVM_ENABLE_PROJECTS", "clang"),),
            cmake_args=("-DLLVM_ENABLE_ASSERTIONS=ON",),
            source_subdir="llvm",
        )
        executor.build(Entry("mine", LocalSource(local_source), options), nproc=1)

        configure = runner.commands[0]
        assert configure[2] == str(local_source / "llvm")
        assert configure[5:7] == ["-G", "Ninja"]
        assert "-DLLVM_TARGETS_TO_BUILD=X86" in configure
        assert "-DLLVM_ENABLE_PROJECTS=clang" in configure
        assert configure[-1] == "-DLLVM_ENABLE_ASSERTIONS=ON"


class TestRun:
    """Test the full pipeline."""

    def test_checkout_then_build(self, root, executor, runner, git_entry):
        build = executor.run(git_entry, nproc=2)

        assert runner.tools() == ["git clone", "cmake -S", "cmake --build", "cmake --install"]
        assert build.prefix == root / "llvm-main"
        assert [b.name for b in BuildRegistry(root).list_builds()] == ["llvm-main"]

    def test_update_fetches_before_build(self, executor, runner, git_entry):
        executor.run(git_entry, update=True, nproc=2)
        assert runner.tools() == [
            "git clone", "git pull", "cmake -S", "cmake --build", "cmake --install",
        ]

    def test_rerun_skips_checkout(self, executor, runner, git_entry):
        executor.run(git_entry, nproc=2)
        runner.calls.clear()

        executor.run(git_entry, nproc=2)

        assert runner.tools() == ["cmake -S", "cmake --build", "cmake --install"]

    def test_checkout_failure_runs_nothing_else(self, root, executor, runner, git_entry):
        runner.fail_on(["git", "clone"], returncode=128)

        with pytest.raises(CheckoutFailed):
            executor.run(git_entry, update=True)

        assert runner.tools() == ["git clone"]
        assert BuildRegistry(root).list_builds() == []

    def test_fetch_failure_skips_build(self, executor, runner, git_entry):
        runner.fail_on(["git", "pull"], returncode=1)

        with pytest.raises(FetchFailed):
            executor.run(git_entry, update=True)

        assert runner.tools() == ["git clone", "git pull"]
