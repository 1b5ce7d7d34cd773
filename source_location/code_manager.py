import logging
from input_helper.evm_disassembler import EvmDisassembler
from source_location.bytecode_comparator import normalize
from source_location.errors import BytecodeFetchFailed, TraceError
from source_location.trace_helper import address_key, is_contract_creation

logger = logging.getLogger(__name__)


class CodeManager:
    """
    Code executed during one trace, by address.

    Creation contexts have no code on chain: their code (the transaction input or the
    CREATE payload) must be registered with `register_creation_code` under the creation token.
    """

    def __init__(self, code_provider, trace=None):
        self.code_provider = code_provider
        self.trace = []
        self.codes = {}
        self.creation_codes = {}
        if trace is not None:
            self.load_trace(trace)

    def load_trace(self, trace):
        if isinstance(trace, dict):
            if "structLogs" not in trace:
                raise TraceError("trace object has no structLogs")
            trace = trace["structLogs"]
        self.trace = list(trace)
        self.codes = {}
        self.creation_codes = {}

    def register_creation_code(self, token, bytecode):
        self.creation_codes[token] = bytecode
        self.codes.pop(token, None)

    async def get_code(self, address):
        key = address_key(address)
        # a creation token can stand for different constructors, its code is never reused
        if key in self.codes and not is_contract_creation(address):
            return self.codes[key]

        if address in self.creation_codes:
            bytecode = self.creation_codes[address]
        else:
            logger.debug(f"fetching code at {address}")
            try:
                bytecode = await self.code_provider.get_code(address)
            except Exception as e:
                raise BytecodeFetchFailed(address, str(e)) from e

        bytecode = normalize(bytecode)
        if bytecode == "0x":
            raise BytecodeFetchFailed(address, "no code at address")

        disassembler = EvmDisassembler(bytecode)
        try:
            instructions = disassembler.prepare_disasm()
        except ValueError as e:
            raise BytecodeFetchFailed(address, f"malformed bytecode: {e}") from e

        code = {
            "bytecode": bytecode,
            "instructions": instructions,
            "index_by_pc": disassembler.index_by_pc(instructions)
        }
        # creation entries only serve the trace step translation of the latest lookup
        self.codes[key] = code
        return code

    def get_current_pc(self, step):
        if step < 0 or step >= len(self.trace):
            raise TraceError(f"trace step {step} is out of range (trace has {len(self.trace)} steps)")
        pc = self.trace[step].get("pc")
        if pc is None:
            raise TraceError(f"trace step {step} has no pc")
        return pc

    def get_instruction_index(self, address, step):
        code = self.codes.get(address_key(address))
        if code is None:
            raise TraceError(f"code at {address} has not been loaded")
        pc = self.get_current_pc(step)
        if pc not in code["index_by_pc"]:
            raise TraceError(f"pc {pc} at step {step} is not an instruction of the code at {address}")
        return code["index_by_pc"][pc]
