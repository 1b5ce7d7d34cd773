import logging
from input_helper.artifact_catalog import ArtifactCatalog
from input_helper.source_map import SourceMappingDecoder
from source_location.bytecode_comparator import compare_bytecode
from source_location.errors import NoSourceMapFound
from source_location.trace_helper import address_key, is_contract_creation

logger = logging.getLogger(__name__)


class SourceLocationTracker:
    """
    Source location of the bytecode being executed, for one debugging session.

    Source maps are cached by address until `clear_cache` is called. Creation contexts
    are never cached: the same token can stand for different constructors.
    """

    def __init__(self, code_manager, debug_with_generated_sources=False):
        self.code_manager = code_manager
        self.debug_with_generated_sources = debug_with_generated_sources
        self.source_mapping_decoder = SourceMappingDecoder()
        self.source_map_by_address = {}

    async def get_source_location_from_instruction_index(self, address, index, contracts):
        source_map = await self._extract_source_map(address, contracts)
        return self.source_mapping_decoder.at_index(index, source_map["map"])

    async def get_source_location_from_vm_trace_index(self, address, vm_trace_step_index, contracts):
        source_map = await self._extract_source_map(address, contracts)
        index = self.code_manager.get_instruction_index(address, vm_trace_step_index)
        return self.source_mapping_decoder.at_index(index, source_map["map"])

    def get_generated_sources_from_address(self, address):
        if not self.debug_with_generated_sources:
            return None
        if address_key(address) in self.source_map_by_address:
            return self.source_map_by_address[address_key(address)]["generated_sources"]
        return None

    def clear_cache(self):
        self.source_map_by_address = {}

    async def _extract_source_map(self, address, contracts):
        if address_key(address) in self.source_map_by_address:
            return self.source_map_by_address[address_key(address)]

        code = await self.code_manager.get_code(address)
        return self.match(address, code["bytecode"], contracts)

    def match(self, address, code, contracts):
        source_map = self.get_source_map(address, code, ArtifactCatalog.wrap(contracts))
        if source_map is None:
            logger.warning(f"no compiled contract matches the code at {address}")
            raise NoSourceMapFound(address)
        if not is_contract_creation(address):
            self.source_map_by_address[address_key(address)] = source_map
        return source_map

    def get_source_map(self, address, code, catalog):
        is_creation = is_contract_creation(address)
        for file, name, contract in catalog:
            if contract.deployed_bytecode is None:
                continue

            artifact = contract.get_artifact(is_creation)
            if artifact is None:
                continue
            if compare_bytecode(code, artifact.object, artifact.get_wildcards()):
                logger.debug(f"code at {address} matches {file}:{name}")
                return {"map": artifact.source_map, "generated_sources": artifact.generated_sources}
        return None
