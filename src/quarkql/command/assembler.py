"""Assembler - wraps actions in the command skeleton and compiles them."""

from __future__ import annotations

import logging
import re
from typing import Optional

from quarkql.action.session import release_session
from quarkql.action.spec import Action
from quarkql.command.compiler import (
    IR_OUTPUT,
    Compiler,
    Language,
    SolcCompiler,
)
from quarkql.command.config import CompileSettings
from quarkql.command.spec import (
    ALLOCATOR,
    DEFAULT_OBJECT_NAME,
    MAGIC_MARKER,
    MARKER_EMISSION,
    Command,
)
from quarkql.exceptions import MagicMarkerMissingError, UnsupportedSourceError
from quarkql.yul import indent

log = logging.getLogger(__name__)

NATIVE_YUL_DESCRIPTION = "Native Yul code"

OBJECT_HEADER = re.compile(r'^object\s*"(\w+)"\s*{\s*code\s*{', re.MULTILINE)

IMPORT_DIRECTIVE = re.compile(r"^\s*import\b", re.MULTILINE)


def render_command(action: Action[None], object_name: str = DEFAULT_OBJECT_NAME) -> str:
    """Render the Yul object for `action`.

    The code block holds, in order: the marker emission, the allocator,
    the preamble entries and the statements, separated by blank lines.
    """
    sections = [MARKER_EMISSION, ALLOCATOR, *action.preamble, *action.statements]
    body = "\n\n".join(indent(section, 4) for section in sections)
    return "\n".join(
        [
            f'object "{object_name}" {{',
            "  code {",
            body,
            "  }",
            "}",
        ]
    )


def _default_compiler(settings: CompileSettings) -> Compiler:
    return SolcCompiler(settings)


def _check_marker(bytecode: str) -> str:
    """Return 0x-prefixed bytecode, raising if the marker is missing."""
    if not bytecode.startswith(MAGIC_MARKER.hex()):
        raise MagicMarkerMissingError(
            "Invalid bytecode produced, does not start with magic incantation "
            f"0x{MAGIC_MARKER.hex()}, got: {bytecode or '<empty>'}"
        )
    return "0x" + bytecode


def prepare(
    action: Action[None],
    compiler: Optional[Compiler] = None,
    settings: Optional[CompileSettings] = None,
) -> Command:
    """Assemble and compile an action into a Command.

    Ends the implicit build session of the calling context, so the next
    build starts its numbering from `__v__0`.

    Args:
        action: The finished (value-less) action, usually a pipeline.
        compiler: Compiler collaborator. Defaults to running solc.
        settings: Compile settings.

    Returns:
        The compiled Command.

    Raises:
        CompileFailureError: If the compiler rejects the source.
        MagicMarkerMissingError: If the bytecode lost the marker.
    """
    settings = settings or CompileSettings()
    compiler = compiler or _default_compiler(settings)

    source = render_command(action, settings.object_name)
    release_session()
    log.debug("Yul\n%s", source)

    compiled = compiler.compile(source, Language.YUL, target=settings.object_name)
    bytecode = _check_marker(compiled[settings.object_name])
    log.info("Prepared command: %s (%d bytes)", action.description, len(bytecode) // 2 - 1)

    return Command(source=source, description=action.description, bytecode=bytecode)


def insert_marker(source: str) -> str:
    """Insert the marker emission at the start of the first code block.

    Raises:
        MagicMarkerMissingError: If the source has no marker and no
            recognizable `object "..." { code {` header.
    """
    if MARKER_EMISSION in source:
        return source

    match = OBJECT_HEADER.search(source)
    if match is None:
        raise MagicMarkerMissingError(
            f"Please include `{MARKER_EMISSION}` at the start of your Yul object."
        )
    end = match.end()
    return f"{source[:end]}\n    {MARKER_EMISSION}{source[end:]}"


def build_yul(
    source: str,
    compiler: Optional[Compiler] = None,
    settings: Optional[CompileSettings] = None,
) -> Command:
    """Compile hand-written Yul into a Command, adding the marker if absent."""
    settings = settings or CompileSettings()
    compiler = compiler or _default_compiler(settings)

    source = insert_marker(source)
    match = OBJECT_HEADER.search(source)
    target = match.group(1) if match else settings.object_name

    compiled = compiler.compile(source, Language.YUL, target=target)
    bytecode = _check_marker(compiled[target])

    return Command(source=source, description=NATIVE_YUL_DESCRIPTION, bytecode=bytecode)


def build_sol(
    source: str,
    function_name: str,
    compiler: Optional[Compiler] = None,
    settings: Optional[CompileSettings] = None,
) -> Command:
    """Compile one external function of a Solidity contract into a Command.

    The contract is lowered to Yul IR; its deployed object is extracted and
    its code block rewritten to emit the marker, call the function and
    return. The result is compiled through `build_yul`.

    Raises:
        UnsupportedSourceError: If the source uses imports or the IR does
            not have the expected shape.
    """
    if IMPORT_DIRECTIVE.search(source):
        raise UnsupportedSourceError(
            "For experimental Solidity support, `import`s are not allowed"
        )

    settings = settings or CompileSettings()
    compiler = compiler or _default_compiler(settings)

    outputs = compiler.compile(source, Language.SOLIDITY, output=IR_OUTPUT)
    if not outputs:
        raise UnsupportedSourceError("Solidity source produced no contracts")
    contract_name, ir = next(iter(outputs.items()))

    deployed = re.search(
        rf'(object "{re.escape(contract_name)}_\d+_deployed" {{.+}})\s*}}\s*',
        ir,
        re.DOTALL,
    )
    if deployed is None:
        raise UnsupportedSourceError(
            "Cannot currently handle Yul produced from .sol file "
            "[cannot find deployed contract]"
        )
    inner = deployed.group(1)

    function = re.search(
        rf'"function {re.escape(function_name)}.*\n\s*function (\w+)', inner
    )
    if function is None:
        raise UnsupportedSourceError(
            "Cannot currently handle Yul produced from .sol file "
            f'[cannot find function "{function_name}"]'
        )

    code_start = re.compile(r"code {.*?function", re.DOTALL)
    code_match = code_start.search(inner)
    if code_match is None:
        raise UnsupportedSourceError(
            "Cannot currently handle Yul produced from .sol file "
            "[cannot find function invocation to replace]"
        )

    memoryguard = re.search(r"^.*memoryguard.*$", code_match.group(0), re.MULTILINE)
    lines = [
        "",
        MARKER_EMISSION,
        memoryguard.group(0).strip() if memoryguard else "",
        f"{function.group(1)}()",
        "return(0,0)",
        "function",
    ]
    replacement = "code {" + "\n            ".join(lines)
    yul_source = code_start.sub(lambda _: replacement, inner, count=1)

    return build_yul(yul_source, compiler=compiler, settings=settings)
