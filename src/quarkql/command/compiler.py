"""Compiler collaborators.

The assembler only depends on the abstract `Compiler`. Implementations
here speak solc's standard-JSON interface, either through any callable
(e.g. a solc binding) or by running the `solc` executable.
"""

from __future__ import annotations

import json
import logging
import subprocess
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

import msgspec

from quarkql.command.config import CompileSettings
from quarkql.exceptions import CompileFailureError

log = logging.getLogger(__name__)

BYTECODE_OUTPUT = "evm.bytecode.object"
IR_OUTPUT = "ir"


class Language(str, Enum):
    YUL = "Yul"
    SOLIDITY = "Solidity"

    @property
    def source_name(self) -> str:
        return "q.yul" if self is Language.YUL else "q.sol"


class Compiler(ABC):
    """Abstract source -> bytecode compiler."""

    @abstractmethod
    def compile(
        self,
        source: str,
        language: Language,
        target: Optional[str] = None,
        output: str = BYTECODE_OUTPUT,
    ) -> Dict[str, str]:
        """Compile `source` and return the selected output per object.

        Args:
            source: Source text.
            language: Source language.
            target: Object (or contract) name to return. None returns all.
            output: Output selector, `evm.bytecode.object` or `ir`.

        Returns:
            Mapping of object name to output text (hex without 0x for
            bytecode).

        Raises:
            CompileFailureError: If compilation fails or `target` is absent.
        """
        pass


# =============================================================================
# Standard JSON output
# =============================================================================


class SolcBytecode(msgspec.Struct):
    object: str = ""


class SolcEvm(msgspec.Struct):
    bytecode: Optional[SolcBytecode] = None


class SolcContract(msgspec.Struct):
    evm: Optional[SolcEvm] = None
    ir: Optional[str] = None


class SolcDiagnostic(msgspec.Struct):
    severity: str
    message: str
    formatted_message: Optional[str] = msgspec.field(
        name="formattedMessage", default=None
    )

    def describe(self) -> str:
        return (self.formatted_message or self.message).strip()


class SolcOutput(msgspec.Struct):
    errors: List[SolcDiagnostic] = []
    contracts: Dict[str, Dict[str, SolcContract]] = {}


StandardJson = Union[str, bytes, Dict[str, Any]]


class StandardJsonCompiler(Compiler):
    """Compiler driving a solc standard-JSON entry point.

    `compile_json` receives the JSON input as a string and returns the
    JSON output, either as text or already decoded.
    """

    def __init__(
        self,
        compile_json: Callable[[str], StandardJson],
        settings: Optional[CompileSettings] = None,
    ):
        self._compile_json = compile_json
        self.settings = settings or CompileSettings()

    def build_input(self, source: str, language: Language, output: str) -> dict:
        """Build the standard-JSON input document."""
        settings: Dict[str, Any] = {
            "outputSelection": {language.source_name: {"*": [output]}},
        }
        if language is Language.YUL:
            settings["optimizer"] = {
                "enabled": self.settings.optimizer.enabled,
                "runs": self.settings.optimizer.runs,
            }
            settings["evmVersion"] = self.settings.evm_version

        return {
            "language": language.value,
            "sources": {language.source_name: {"content": source}},
            "settings": settings,
        }

    def compile(
        self,
        source: str,
        language: Language,
        target: Optional[str] = None,
        output: str = BYTECODE_OUTPUT,
    ) -> Dict[str, str]:
        request = json.dumps(self.build_input(source, language, output))
        result = self._decode(self._compile_json(request))

        errors = [d for d in result.errors if d.severity == "error"]
        for diagnostic in result.errors:
            if diagnostic.severity != "error":
                log.warning("solc %s: %s", diagnostic.severity, diagnostic.describe())
        if errors:
            raise CompileFailureError(
                f"{language.value} compilation failed",
                [d.describe() for d in errors],
            )

        objects = {
            name: self._select(contract, output)
            for name, contract in result.contracts.get(language.source_name, {}).items()
        }
        if target is None:
            return objects
        if target not in objects:
            raise CompileFailureError(
                f"Compiler output has no object named {target!r}",
                sorted(objects),
            )
        return {target: objects[target]}

    @staticmethod
    def _decode(raw: StandardJson) -> SolcOutput:
        try:
            if isinstance(raw, (str, bytes)):
                return msgspec.json.decode(raw, type=SolcOutput)
            return msgspec.convert(raw, type=SolcOutput)
        except (msgspec.DecodeError, msgspec.ValidationError) as exc:
            raise CompileFailureError(f"Unreadable compiler output: {exc}") from exc

    @staticmethod
    def _select(contract: SolcContract, output: str) -> str:
        if output == IR_OUTPUT:
            return contract.ir or ""
        if contract.evm is None or contract.evm.bytecode is None:
            return ""
        return contract.evm.bytecode.object


class SolcCompiler(StandardJsonCompiler):
    """Compiler running `solc --standard-json` as a subprocess."""

    def __init__(self, settings: Optional[CompileSettings] = None):
        super().__init__(self._run_solc, settings)

    def _run_solc(self, request: str) -> str:
        cmd = [self.settings.solc_path, "--standard-json"]
        log.debug("Running: %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                input=request,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as exc:
            raise CompileFailureError(
                f"solc executable not found: {self.settings.solc_path}"
            ) from exc

        if not result.stdout.strip():
            raise CompileFailureError(
                f"solc exited with code {result.returncode} and no output",
                [result.stderr.strip()] if result.stderr.strip() else [],
            )
        return result.stdout
