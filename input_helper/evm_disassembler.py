from pyevmasm import evmasm
from binascii import unhexlify
from source_location.bytecode_comparator import normalize, strip_metadata


class EvmDisassembler:
    def __init__(self, bytecodes):
        self.bytecodes = bytecodes

    def prepare_disasm(self):
        evm = strip_metadata(normalize(self.bytecodes))[2:]
        instructions = list(evmasm.disassemble_all(unhexlify(evm)))
        return instructions

    def index_by_pc(self, instructions):
        # instruction index as counted by the source map, keyed by the offset of the opcode
        return {instruction.pc: index for index, instruction in enumerate(instructions)}
