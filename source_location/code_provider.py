import logging
from web3 import AsyncWeb3, AsyncHTTPProvider, Web3
from utils import params
from source_location.trace_helper import is_contract_creation

logger = logging.getLogger(__name__)


class StaticCodeProvider:
    """Serve code from a dict of address -> hex string, e.g. codes dumped next to a trace."""

    def __init__(self, codes):
        self.codes = {address.lower(): code for address, code in codes.items()}

    async def get_code(self, address):
        if address.lower() not in self.codes:
            raise LookupError(f"no code recorded for {address}")
        return self.codes[address.lower()]


class RpcCodeProvider:
    def __init__(self, rpc_url=None, block_identifier=None):
        self.rpc_url = rpc_url or params.RPC_URL
        self.block_identifier = block_identifier or params.BLOCK_IDENTIFIER
        self.w3 = AsyncWeb3(AsyncHTTPProvider(self.rpc_url))

    async def get_code(self, address):
        if is_contract_creation(address):
            raise ValueError("creation code is not stored on chain, register it on the code manager")
        logger.debug(f"eth_getCode {address} at {self.block_identifier} from {self.rpc_url}")
        code = await self.w3.eth.get_code(Web3.to_checksum_address(address), self.block_identifier)
        return Web3.to_hex(code)
