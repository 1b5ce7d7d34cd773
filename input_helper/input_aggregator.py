from utils import params
from utils.util import load_json
from input_helper.artifact_catalog import ArtifactCatalog
from input_helper.source_map import Source
from source_location.code_manager import CodeManager
from source_location.code_provider import RpcCodeProvider, StaticCodeProvider
import logging
import os

logger = logging.getLogger(__name__)


class InputAggregator:
    def __init__(self, artifacts, **kwargs):
        self.artifacts = artifacts

        attr_defaults = {
            'trace': None,
            'code': None,
            'rpc_url': params.RPC_URL,
            'block_identifier': params.BLOCK_IDENTIFIER,
            'source_root': ""
        }

        for attr, default in attr_defaults.items():
            val = kwargs.get(attr, default)
            setattr(self, attr, val)

    def get_catalog(self):
        output = load_json(self.artifacts)
        # hardhat build-info files wrap the compiler output
        if 'output' in output and 'contracts' not in output:
            output = output['output']
        if 'contracts' in output:
            catalog = ArtifactCatalog.from_solc_output(output)
        else:
            catalog = ArtifactCatalog.from_contracts(output)
        logger.info(f"Loaded {len(catalog)} compiled contracts from {self.artifacts}")
        return catalog

    def get_code_provider(self):
        if self.code:
            return StaticCodeProvider(load_json(self.code))
        return RpcCodeProvider(self.rpc_url, self.block_identifier)

    def get_trace(self):
        if self.trace is None:
            return []
        return load_json(self.trace)

    def get_source(self, file_name):
        if file_name is None:
            return None
        path = os.path.join(self.source_root, file_name)
        if not os.path.isfile(path):
            logger.warning(f"Source file not found: {path}")
            return None
        return Source(path)

    def get_aggregated_results(self):
        return {
            'catalog': self.get_catalog(),
            'code_manager': CodeManager(self.get_code_provider(), self.get_trace())
        }
