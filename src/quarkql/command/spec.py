"""Command spec - the program skeleton and the compiled artifact."""

from dataclasses import dataclass

from quarkql.utils import to_bytes

MAGIC_MARKER = bytes.fromhex("303030505050")

DEFAULT_OBJECT_NAME = "QuarkCommand"

MARKER_EMISSION = f'verbatim_0i_0o(hex"{MAGIC_MARKER.hex()}")'

ALLOCATOR = """
function allocate(size) -> ptr {
  ptr := mload(0x40)
  if iszero(ptr) { ptr := 0x60 }
  mstore(0x40, add(ptr, size))
}
""".strip()


@dataclass(frozen=True)
class Command:
    """A compiled Quark script.

    `bytecode` is 0x-prefixed hex and always begins with MAGIC_MARKER.
    """

    source: str
    description: str
    bytecode: str

    @property
    def code(self) -> bytes:
        return to_bytes(self.bytecode)
