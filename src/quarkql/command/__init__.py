"""Commands - assembling actions into compiled Quark scripts."""

from quarkql.command.assembler import (
    build_sol,
    build_yul,
    insert_marker,
    prepare,
    render_command,
)
from quarkql.command.compiler import (
    Compiler,
    Language,
    SolcCompiler,
    StandardJsonCompiler,
)
from quarkql.command.config import (
    CompileSettings,
    OptimizerSettings,
    load_settings,
    resolve_settings,
    save_settings,
)
from quarkql.command.spec import ALLOCATOR, MAGIC_MARKER, MARKER_EMISSION, Command

__all__ = [
    "ALLOCATOR",
    "MAGIC_MARKER",
    "MARKER_EMISSION",
    "Command",
    "Compiler",
    "Language",
    "SolcCompiler",
    "StandardJsonCompiler",
    "CompileSettings",
    "OptimizerSettings",
    "load_settings",
    "resolve_settings",
    "save_settings",
    "build_sol",
    "build_yul",
    "insert_marker",
    "prepare",
    "render_command",
]
