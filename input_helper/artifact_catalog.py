import logging
from source_location.errors import MalformedCatalog

logger = logging.getLogger(__name__)


def _expect_dict(value, path):
    if not isinstance(value, dict):
        raise MalformedCatalog(f"{path}: expected an object, got {type(value).__name__}")
    return value


def _optional_str(value, path):
    if value is not None and not isinstance(value, str):
        raise MalformedCatalog(f"{path}: expected a string, got {type(value).__name__}")
    return value


def _regions(value, path):
    # [{"start": int, "length": int}, ...] -> [(start, length), ...]
    regions = []
    if value is None:
        return regions
    if not isinstance(value, list):
        raise MalformedCatalog(f"{path}: expected a list, got {type(value).__name__}")
    for i, region in enumerate(value):
        region = _expect_dict(region, f"{path}[{i}]")
        start, length = region.get("start"), region.get("length")
        if not isinstance(start, int) or not isinstance(length, int):
            raise MalformedCatalog(f"{path}[{i}]: start and length must be integers")
        regions.append((start, length))
    return regions


class GeneratedSource:
    def __init__(self, id, ast=None, contents="", name=None, language=None):
        self.id = id
        self.ast = ast
        self.contents = contents
        self.name = name
        self.language = language

    @classmethod
    def from_json(cls, data, path):
        data = _expect_dict(data, path)
        if not isinstance(data.get("id"), int):
            raise MalformedCatalog(f"{path}.id: expected an integer source id")
        return cls(data["id"], data.get("ast"), _optional_str(data.get("contents", ""), f"{path}.contents"),
                   data.get("name"), data.get("language"))

    def to_json(self):
        return {"id": self.id, "ast": self.ast, "contents": self.contents, "name": self.name, "language": self.language}

    def __eq__(self, other):
        return isinstance(other, GeneratedSource) and self.to_json() == other.to_json()

    def __repr__(self):
        return f"GeneratedSource(id={self.id}, name={self.name!r})"


class BytecodeArtifact:
    def __init__(self, object, source_map=None, generated_sources=None, immutable_references=None,
                 link_references=None):
        self.object = object
        self.source_map = source_map
        self.generated_sources = generated_sources
        self.immutable_references = immutable_references or []
        self.link_references = link_references or []

    @classmethod
    def from_json(cls, data, path):
        data = _expect_dict(data, path)
        obj = _optional_str(data.get("object", ""), f"{path}.object") or ""
        source_map = _optional_str(data.get("sourceMap"), f"{path}.sourceMap")

        generated_sources = None
        if data.get("generatedSources") is not None:
            if not isinstance(data["generatedSources"], list):
                raise MalformedCatalog(f"{path}.generatedSources: expected a list")
            generated_sources = [GeneratedSource.from_json(source, f"{path}.generatedSources[{i}]")
                                 for i, source in enumerate(data["generatedSources"])]

        immutable_references = []
        for ast_id, regions in _expect_dict(data.get("immutableReferences", {}), f"{path}.immutableReferences").items():
            immutable_references.extend(_regions(regions, f"{path}.immutableReferences.{ast_id}"))

        link_references = []
        for file, libraries in _expect_dict(data.get("linkReferences", {}), f"{path}.linkReferences").items():
            for library, regions in _expect_dict(libraries, f"{path}.linkReferences.{file}").items():
                link_references.extend(_regions(regions, f"{path}.linkReferences.{file}.{library}"))

        return cls(obj, source_map, generated_sources, immutable_references, link_references)

    def get_wildcards(self):
        return self.immutable_references + self.link_references


class CompiledContract:
    def __init__(self, name, bytecode, deployed_bytecode):
        self.name = name
        self.bytecode = bytecode
        self.deployed_bytecode = deployed_bytecode

    @classmethod
    def from_json(cls, name, data, path):
        data = _expect_dict(data, path)
        evm = _expect_dict(data.get("evm", {}), f"{path}.evm")
        bytecode = deployed_bytecode = None
        if evm.get("bytecode") is not None:
            bytecode = BytecodeArtifact.from_json(evm["bytecode"], f"{path}.evm.bytecode")
        if evm.get("deployedBytecode") is not None:
            deployed_bytecode = BytecodeArtifact.from_json(evm["deployedBytecode"], f"{path}.evm.deployedBytecode")
        return cls(name, bytecode, deployed_bytecode)

    def get_artifact(self, is_creation):
        return self.bytecode if is_creation else self.deployed_bytecode


class ArtifactCatalog:
    """Compiled contracts by file then contract name, in compiler output order."""

    def __init__(self, contracts=None, sources=None):
        self.contracts = contracts or {}
        self.sources = sources or {}  # source id -> file name

    @classmethod
    def from_contracts(cls, contracts, sources=None):
        contracts = _expect_dict(contracts, "contracts")
        catalog = {}
        for file, file_contracts in contracts.items():
            file_contracts = _expect_dict(file_contracts, f"contracts.{file}")
            catalog[file] = {name: CompiledContract.from_json(name, data, f"contracts.{file}.{name}")
                             for name, data in file_contracts.items()}
        return cls(catalog, sources)

    @classmethod
    def from_solc_output(cls, output):
        output = _expect_dict(output, "output")
        sources = {}
        for file, source in _expect_dict(output.get("sources", {}), "sources").items():
            source = _expect_dict(source, f"sources.{file}")
            if isinstance(source.get("id"), int):
                sources[source["id"]] = file
        return cls.from_contracts(output.get("contracts", {}), sources)

    @classmethod
    def wrap(cls, catalog):
        if isinstance(catalog, ArtifactCatalog):
            return catalog
        return cls.from_contracts(catalog)

    def __iter__(self):
        for file, file_contracts in self.contracts.items():
            for name, contract in file_contracts.items():
                yield file, name, contract

    def __len__(self):
        return sum(len(file_contracts) for file_contracts in self.contracts.values())

    def get_contract(self, file, name):
        return self.contracts.get(file, {}).get(name)

    def get_source_name(self, file_id, generated_sources=None):
        if file_id in self.sources:
            return self.sources[file_id]
        for source in generated_sources or []:
            if source.id == file_id:
                return source.name
        return None
