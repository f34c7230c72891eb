"""CHIP-8 ALU operations (8xxx).

Each operation maps the register file to a new register file. Operations
that produce a flag write VF after the result, so ``8FY_`` leaves the flag
in VF.
"""

import jax
import jax.lax
import jax.numpy as jnp
from vipax.constants import FLAG_REGISTER
from vipax.state import EmulatorState
from vipax.decode import DecodedInstruction
from vipax.instructions.system import unknown_instruction


def _with_flag(V: jnp.ndarray, x, result, flag) -> jnp.ndarray:
    V = V.at[x].set(jnp.astype(result, jnp.uint8))
    return V.at[FLAG_REGISTER].set(jnp.astype(flag, jnp.uint8))


def alu_set(V: jnp.ndarray, x, y) -> jnp.ndarray:
    """8XY0 - Set: VX = VY."""
    return V.at[x].set(V[y])


def alu_or(V: jnp.ndarray, x, y) -> jnp.ndarray:
    """8XY1 - Binary OR: VX |= VY."""
    return V.at[x].set(V[x] | V[y])


def alu_and(V: jnp.ndarray, x, y) -> jnp.ndarray:
    """8XY2 - Binary AND: VX &= VY."""
    return V.at[x].set(V[x] & V[y])


def alu_xor(V: jnp.ndarray, x, y) -> jnp.ndarray:
    """8XY3 - Logical XOR: VX ^= VY."""
    return V.at[x].set(V[x] ^ V[y])


def alu_add(V: jnp.ndarray, x, y) -> jnp.ndarray:
    """8XY4 - Add: VX += VY, VF = carry."""
    result = jnp.astype(V[x], jnp.int32) + jnp.astype(V[y], jnp.int32)
    return _with_flag(V, x, result & 0xFF, result > 0xFF)


def alu_sub_xy(V: jnp.ndarray, x, y) -> jnp.ndarray:
    """8XY5 - Subtract: VX -= VY, VF = 1 when there is no borrow."""
    vx, vy = V[x], V[y]
    return _with_flag(V, x, vx - vy, vx >= vy)


def alu_shift_right(V: jnp.ndarray, x, y) -> jnp.ndarray:
    """8XY6 - Shift right: VX >>= 1, VF = old bit 0."""
    vx = V[x]
    return _with_flag(V, x, vx >> 1, vx & 1)


def alu_sub_yx(V: jnp.ndarray, x, y) -> jnp.ndarray:
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when there is no borrow."""
    vx, vy = V[x], V[y]
    return _with_flag(V, x, vy - vx, vy >= vx)


def alu_shift_left(V: jnp.ndarray, x, y) -> jnp.ndarray:
    """8XYE - Shift left: VX <<= 1, VF = old bit 7."""
    vx = V[x]
    return _with_flag(V, x, (vx << 1) & 0xFF, (vx & 0x80) >> 7)


# Sub-opcode -> position in the branch list below; -1 marks undefined operations.
_ALU_INDEX = jnp.array([0, 1, 2, 3, 4, 5, 6, 7, -1, -1, -1, -1, -1, -1, 8, -1], dtype=jnp.int32)


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    branch = _ALU_INDEX[instruction.n]

    def _execute(state, instruction):
        new_V = jax.lax.switch(
            branch,
            [alu_set, alu_or, alu_and, alu_xor, alu_add,
             alu_sub_xy, alu_shift_right, alu_sub_yx, alu_shift_left],
            state.V, instruction.x, instruction.y
        )
        return state.replace(V=new_V)

    return jax.lax.cond(branch >= 0, _execute, unknown_instruction, state, instruction)
