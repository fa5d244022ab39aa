"""QuarkQL - composable Quark scripts for the EVM"""

from quarkql.action import (
    Action,
    BuildSession,
    Preamble,
    build_action,
    build_session,
    current_session,
    pipe,
    pipeline,
    pop,
    release_session,
    reset_session,
)
from quarkql.bytecode import relocate, relocate_hex
from quarkql.command import (
    MAGIC_MARKER,
    Command,
    CompileSettings,
    Compiler,
    Language,
    SolcCompiler,
    StandardJsonCompiler,
    build_sol,
    build_yul,
    prepare,
    resolve_settings,
)
from quarkql.exceptions import (
    CompileFailureError,
    InvalidLiteralError,
    MagicMarkerMissingError,
    MissingStatementError,
    PushOverflowError,
    QuarkError,
    UnresolvedDynamicJumpError,
    UnsupportedSourceError,
)
from quarkql.invocation import invoke, read_address, read_uint256, wrap
from quarkql.utils import call_sig, setup_logging
from quarkql.values import UINT256_MAX, Address, Bool, Bytes, Uint256, Variable
from quarkql.yul import yul

__all__ = [
    # values
    "Address",
    "Bool",
    "Bytes",
    "Uint256",
    "Variable",
    "UINT256_MAX",
    "yul",
    "call_sig",
    # actions
    "Action",
    "Preamble",
    "BuildSession",
    "build_session",
    "current_session",
    "reset_session",
    "release_session",
    "build_action",
    "pipe",
    "pipeline",
    "pop",
    "invoke",
    "read_address",
    "read_uint256",
    "wrap",
    # commands
    "MAGIC_MARKER",
    "Command",
    "CompileSettings",
    "Compiler",
    "Language",
    "SolcCompiler",
    "StandardJsonCompiler",
    "build_sol",
    "build_yul",
    "prepare",
    "resolve_settings",
    "relocate",
    "relocate_hex",
    # errors
    "QuarkError",
    "CompileFailureError",
    "InvalidLiteralError",
    "MagicMarkerMissingError",
    "MissingStatementError",
    "PushOverflowError",
    "UnresolvedDynamicJumpError",
    "UnsupportedSourceError",
    "setup_logging",
]
