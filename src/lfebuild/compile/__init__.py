"""
LFE compilation for lfebuild.

This package provides:
- Source discovery (SourceScanner)
- Compile option merging (CompileOptions)
- The wrapped lfec compiler (LfecCompiler)
- Diagnostic reporting (ConsoleReporter)
- The staged compile task (LfeCompileTask)
"""

from .code_path import CodePath, RuntimeEnvironment
from .compiler import LfecCompiler, SourceCompiler
from .options import CompileOptions, ErlOpts
from .reporter import ConsoleReporter, DiagnosticReporter, NullReporter
from .results import CompileResult, CompileStatus, Diagnostic, Severity
from .source_scanner import SourceScanner
from .task import LfeCompileTask, format_error

__all__ = [
    "CodePath",
    "CompileOptions",
    "CompileResult",
    "CompileStatus",
    "ConsoleReporter",
    "Diagnostic",
    "DiagnosticReporter",
    "ErlOpts",
    "LfeCompileTask",
    "LfecCompiler",
    "NullReporter",
    "RuntimeEnvironment",
    "Severity",
    "SourceCompiler",
    "SourceScanner",
    "format_error",
]
