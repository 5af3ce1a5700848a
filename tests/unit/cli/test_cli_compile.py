"""Tests for the 'lfebuild lfe compile' command."""

import io
from pathlib import Path
from unittest.mock import patch

import pytest

from lfebuild import output
from lfebuild.cli import CompileArgs, build_parser, compile_command, main
from lfebuild.compile.results import CompileResult
from lfebuild.compile.task import LfeCompileTask
from lfebuild.errors import CompilerNotFoundError


@pytest.fixture
def captured_output():
    """Capture lfebuild.output lines."""
    stream = io.StringIO()
    output.init_timer(stream)
    return stream


@pytest.fixture
def task(fake_compiler, reporter, runtime):
    return LfeCompileTask(compiler=fake_compiler, reporter=reporter, runtime=runtime)


class TestParser:
    def test_compile_with_project_dir(self, tmp_path):
        parsed = build_parser().parse_args(["lfe", "compile", str(tmp_path)])
        assert parsed.namespace == "lfe"
        assert parsed.command == "compile"
        assert parsed.project_dir == tmp_path
        assert parsed.verbose is False

    def test_verbose_flag(self, tmp_path):
        assert build_parser().parse_args(["-v", "lfe", "compile"]).verbose is True

    def test_compile_takes_no_flags(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["lfe", "compile", "--clean"])

    def test_namespace_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestCompileCommand:
    def test_success(self, tmp_path, make_app, task, fake_compiler, captured_output):
        make_app(root=tmp_path, sources=["a.lfe", "b.lfe"])

        code = compile_command(CompileArgs(project_dir=tmp_path), task=task)

        assert code == 0
        assert fake_compiler.compiled_names == ["a.lfe", "b.lfe"]
        text = captured_output.getvalue()
        assert "Compiled 2 files" in text
        assert "Compile time:" in text

    def test_missing_first_file_exits_1(self, tmp_path, make_app, task, fake_compiler, captured_output):
        make_app(root=tmp_path, sources=["a.lfe"], ini="[lfe]\nlfe_first_files = src/missing.lfe\n")

        code = compile_command(CompileArgs(project_dir=tmp_path), task=task)

        assert code == 1
        assert fake_compiler.calls == []
        assert "ERROR: File 'src/missing.lfe' is missing, aborting" in captured_output.getvalue()

    def test_no_project_exits_1(self, tmp_path, task, captured_output):
        code = compile_command(CompileArgs(project_dir=tmp_path), task=task)

        assert code == 1
        assert "No main application found" in captured_output.getvalue()

    def test_compile_error_exits_1(self, tmp_path, make_app, task, fake_compiler, error_for, captured_output):
        make_app(root=tmp_path, sources=["a.lfe", "b.lfe"])
        fake_compiler.results["a.lfe"] = CompileResult.error([error_for("a.lfe")])

        code = compile_command(CompileArgs(project_dir=tmp_path), task=task)

        assert code == 1
        assert fake_compiler.compiled_names == ["a.lfe"]
        assert "Failed to compile" in captured_output.getvalue()

    def test_compiler_not_found_exits_1(self, tmp_path, make_app, task, fake_compiler, captured_output):
        make_app(root=tmp_path, sources=["a.lfe"])

        with patch.object(fake_compiler, "compile", side_effect=CompilerNotFoundError("lfec")):
            code = compile_command(CompileArgs(project_dir=tmp_path), task=task)

        assert code == 1
        assert "not found on PATH" in captured_output.getvalue()

    def test_keyboard_interrupt_exits_130(self, tmp_path, make_app, task, fake_compiler, captured_output):
        make_app(root=tmp_path, sources=["a.lfe"])

        with patch.object(fake_compiler, "compile", side_effect=KeyboardInterrupt):
            code = compile_command(CompileArgs(project_dir=tmp_path), task=task)

        assert code == 130

    def test_undecodable_config_exits_1(self, tmp_path, make_app, task, fake_compiler, captured_output):
        make_app(root=tmp_path, sources=["a.lfe"])
        (tmp_path / "lfebuild.ini").write_bytes(b"[lfe]\nerl_opts = \xff\xfe\n")

        code = compile_command(CompileArgs(project_dir=tmp_path), task=task)

        assert code == 1
        assert fake_compiler.calls == []
        assert "ERROR: Failed to parse" in captured_output.getvalue()

    def test_permission_denied_exits_1(self, tmp_path, make_app, task, fake_compiler, captured_output):
        make_app(root=tmp_path, sources=["a.lfe"])

        with patch.object(Path, "mkdir", side_effect=PermissionError("denied")):
            code = compile_command(CompileArgs(project_dir=tmp_path), task=task)

        assert code == 1
        assert fake_compiler.calls == []
        assert "ERROR: Permission denied: denied" in captured_output.getvalue()

    def test_os_error_exits_1(self, tmp_path, make_app, task, fake_compiler, captured_output):
        make_app(root=tmp_path, sources=["a.lfe"])

        with patch.object(fake_compiler, "compile", side_effect=OSError("disk full")):
            code = compile_command(CompileArgs(project_dir=tmp_path), task=task)

        assert code == 1
        assert "ERROR: OSError: disk full" in captured_output.getvalue()

    def test_unexpected_error_exits_1(self, tmp_path, make_app, task, fake_compiler, captured_output):
        make_app(root=tmp_path, sources=["a.lfe"])

        with patch.object(fake_compiler, "compile", side_effect=RuntimeError("boom")):
            code = compile_command(CompileArgs(project_dir=tmp_path), task=task)

        assert code == 1
        text = captured_output.getvalue()
        assert "ERROR: Unexpected error: RuntimeError: boom" in text
        assert "Traceback" not in text

    def test_unexpected_error_traceback_when_verbose(self, tmp_path, make_app, task, fake_compiler, captured_output):
        make_app(root=tmp_path, sources=["a.lfe"])

        with patch.object(fake_compiler, "compile", side_effect=RuntimeError("boom")):
            code = compile_command(CompileArgs(project_dir=tmp_path, verbose=True), task=task)

        assert code == 1
        assert "Traceback" in captured_output.getvalue()

    def test_verbose_lists_compiled_files(self, tmp_path, make_app, task, captured_output):
        make_app(root=tmp_path, sources=["a.lfe", "b.lfe"], ini="[lfe]\nerl_opts = +debug_info\n")

        code = compile_command(CompileArgs(project_dir=tmp_path, verbose=True), task=task)

        assert code == 0
        text = captured_output.getvalue()
        assert "erl_opts: +debug_info" in text
        assert "a.lfe" in text
        assert "b.lfe" in text

    def test_quiet_run_omits_file_list(self, tmp_path, make_app, task, captured_output):
        make_app(root=tmp_path, sources=["a.lfe"], ini="[lfe]\nerl_opts = +debug_info\n")

        code = compile_command(CompileArgs(project_dir=tmp_path), task=task)

        assert code == 0
        text = captured_output.getvalue()
        assert "erl_opts:" not in text
        assert "a.lfe" not in text


class TestMain:
    def test_main_exits_with_command_code(self, tmp_path, make_app, task, captured_output):
        make_app(root=tmp_path, sources=["a.lfe"])

        with patch("lfebuild.cli.LfeCompileTask", return_value=task):
            with pytest.raises(SystemExit) as exc_info:
                main(["lfe", "compile", str(tmp_path)])

        assert exc_info.value.code == 0
        assert (tmp_path / "ebin" / "a.beam").exists()

    def test_main_failure_exit_code(self, tmp_path, task, captured_output):
        with patch("lfebuild.cli.LfeCompileTask", return_value=task):
            with pytest.raises(SystemExit) as exc_info:
                main(["lfe", "compile", str(tmp_path)])

        assert exc_info.value.code == 1
