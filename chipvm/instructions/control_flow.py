"""CHIP-8 control flow instructions."""

from chipvm.state import MachineState
from chipvm.decode import DecodedInstruction
from chipvm.memory import check_key
from chipvm.stack import push
from chipvm.instructions.base import set_pc, skip_if


def execute_jump(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """1NNN - Jump to address NNN."""
    return set_pc(state, instruction.nnn)


def execute_call(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """2NNN - Call subroutine at NNN."""
    pc = int(state.pc)
    state = state.replace(stack=push(state.stack, pc, pc=pc))
    return execute_jump(state, instruction)


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: MachineState, instruction: DecodedInstruction) -> MachineState:
        return skip_if(state, bool(condition_fn(state, instruction)))
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == inst.kk
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != inst.kk
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == int(state.V[inst.y])
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != int(state.V[inst.y])
)


def execute_jump_with_offset(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """BNNN - Jump to address NNN + V0."""
    return set_pc(state, instruction.nnn + int(state.V[0]))


def _key_pressed(state: MachineState, instruction: DecodedInstruction) -> bool:
    key_index = int(state.V[instruction.x])
    check_key(key_index, pc=int(state.pc))
    return bool(state.keypad[key_index])


def execute_skip_if_key_pressed(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """EX9E - Skip if key VX is pressed."""
    return skip_if(state, _key_pressed(state, instruction))


def execute_skip_if_key_not_pressed(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """EXA1 - Skip if key VX is not pressed."""
    return skip_if(state, not _key_pressed(state, instruction))


KEY_INSTRUCTIONS = {
    0x9E: execute_skip_if_key_pressed,
    0xA1: execute_skip_if_key_not_pressed,
}
