"""CHIP-8 instruction decoding."""

from chex import dataclass


@dataclass(frozen=True)
class DecodedInstruction:
    """Operand fields of a 16-bit big-endian CHIP-8 opcode."""
    raw: int
    opcode: int  # Top nibble, selects the instruction family
    x: int       # Bits 8-11, VX register index
    y: int       # Bits 4-7, VY register index
    n: int       # Low nibble
    nn: int      # Low byte
    nnn: int     # Low 12 bits, address operand


def decode(instruction: int) -> DecodedInstruction:
    """Split a 16-bit opcode into its operand fields."""
    return DecodedInstruction(
        raw=instruction,
        opcode=(instruction >> 12) & 0xF,
        x=(instruction >> 8) & 0xF,
        y=(instruction >> 4) & 0xF,
        n=instruction & 0xF,
        nn=instruction & 0xFF,
        nnn=instruction & 0xFFF,
    )


_FAMILY_FORMATS = {
    0x1: "JP {nnn:03X}",
    0x2: "CALL {nnn:03X}",
    0x3: "SE V{x:X}, {nn:02X}",
    0x4: "SNE V{x:X}, {nn:02X}",
    0x6: "LD V{x:X}, {nn:02X}",
    0x7: "ADD V{x:X}, {nn:02X}",
    0xA: "LD I, {nnn:03X}",
    0xB: "JP V0, {nnn:03X}",
    0xC: "RND V{x:X}, {nn:02X}",
    0xD: "DRW V{x:X}, V{y:X}, {n:X}",
}

_ALU_FORMATS = {
    0x0: "LD V{x:X}, V{y:X}",
    0x1: "OR V{x:X}, V{y:X}",
    0x2: "AND V{x:X}, V{y:X}",
    0x3: "XOR V{x:X}, V{y:X}",
    0x4: "ADD V{x:X}, V{y:X}",
    0x5: "SUB V{x:X}, V{y:X}",
    0x6: "SHR V{x:X}",
    0x7: "SUBN V{x:X}, V{y:X}",
    0xE: "SHL V{x:X}",
}

_MISC_FORMATS = {
    0x07: "LD V{x:X}, DT",
    0x0A: "LD V{x:X}, K",
    0x15: "LD DT, V{x:X}",
    0x18: "LD ST, V{x:X}",
    0x1E: "ADD I, V{x:X}",
    0x29: "LD F, V{x:X}",
    0x33: "LD B, V{x:X}",
    0x55: "LD [I], V{x:X}",
    0x65: "LD V{x:X}, [I]",
}


def disassemble(instruction: int) -> str:
    """Return a mnemonic for a concrete opcode, or ``"??? XXXX"`` if it is unknown."""
    instruction = int(instruction)
    fields = {
        "x": (instruction >> 8) & 0xF,
        "y": (instruction >> 4) & 0xF,
        "n": instruction & 0xF,
        "nn": instruction & 0xFF,
        "nnn": instruction & 0xFFF,
    }
    family = instruction >> 12

    fmt = None
    if instruction == 0x00E0:
        fmt = "CLS"
    elif instruction == 0x00EE:
        fmt = "RET"
    elif family in _FAMILY_FORMATS:
        fmt = _FAMILY_FORMATS[family]
    elif family in (0x5, 0x9) and fields["n"] == 0:
        fmt = ("SE" if family == 0x5 else "SNE") + " V{x:X}, V{y:X}"
    elif family == 0x8:
        fmt = _ALU_FORMATS.get(fields["n"])
    elif family == 0xE and fields["nn"] in (0x9E, 0xA1):
        fmt = ("SKP" if fields["nn"] == 0x9E else "SKNP") + " V{x:X}"
    elif family == 0xF:
        fmt = _MISC_FORMATS.get(fields["nn"])

    if fmt is None:
        return f"??? {instruction:04X}"
    return fmt.format(**fields)
