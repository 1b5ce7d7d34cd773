import pytest
from input_helper.artifact_catalog import ArtifactCatalog
from source_location.errors import MalformedCatalog

SOLC_OUTPUT = {
    "sources": {"A.sol": {"id": 0}, "B.sol": {"id": 1}},
    "contracts": {
        "A.sol": {
            "Foo": {
                "evm": {
                    "bytecode": {
                        "object": "6080",
                        "sourceMap": "0:1:0:-",
                        "linkReferences": {"B.sol": {"Math": [{"start": 10, "length": 20}]}}
                    },
                    "deployedBytecode": {
                        "object": "6001",
                        "sourceMap": "0:1:0:-",
                        "immutableReferences": {"7": [{"start": 3, "length": 32}, {"start": 40, "length": 32}]},
                        "generatedSources": [{"id": 2, "ast": {}, "contents": "{ }", "name": "#utility.yul", "language": "Yul"}]
                    }
                }
            },
            "IFoo": {"evm": {"bytecode": {"object": ""}, "deployedBytecode": {"object": ""}}}
        },
        "B.sol": {"Math": {"abi": []}}
    }
}


def test_from_solc_output():
    catalog = ArtifactCatalog.from_solc_output(SOLC_OUTPUT)
    assert len(catalog) == 3
    assert [(file, name) for file, name, _ in catalog] == [("A.sol", "Foo"), ("A.sol", "IFoo"), ("B.sol", "Math")]

    foo = catalog.get_contract("A.sol", "Foo")
    assert foo.get_artifact(True).object == "6080"
    assert foo.get_artifact(False).source_map == "0:1:0:-"
    assert foo.bytecode.get_wildcards() == [(10, 20)]
    assert foo.deployed_bytecode.get_wildcards() == [(3, 32), (40, 32)]
    assert foo.deployed_bytecode.generated_sources[0].name == "#utility.yul"
    assert foo.bytecode.generated_sources is None

    assert catalog.get_contract("B.sol", "Math").deployed_bytecode is None
    assert catalog.get_contract("B.sol", "Nope") is None


def test_source_names():
    catalog = ArtifactCatalog.from_solc_output(SOLC_OUTPUT)
    generated = catalog.get_contract("A.sol", "Foo").deployed_bytecode.generated_sources
    assert catalog.get_source_name(1) == "B.sol"
    assert catalog.get_source_name(2) is None
    assert catalog.get_source_name(2, generated) == "#utility.yul"


def test_wrap():
    catalog = ArtifactCatalog.from_solc_output(SOLC_OUTPUT)
    assert ArtifactCatalog.wrap(catalog) is catalog
    assert len(ArtifactCatalog.wrap(SOLC_OUTPUT["contracts"])) == 3


@pytest.mark.parametrize("contracts, path", [
    (["A.sol"], "contracts"),
    ({"A.sol": ["Foo"]}, "contracts.A.sol"),
    ({"A.sol": {"Foo": {"evm": []}}}, "contracts.A.sol.Foo.evm"),
    ({"A.sol": {"Foo": {"evm": {"deployedBytecode": {"object": 1}}}}}, "contracts.A.sol.Foo.evm.deployedBytecode.object"),
    ({"A.sol": {"Foo": {"evm": {"deployedBytecode": {"generatedSources": [{"name": "x"}]}}}}},
     "contracts.A.sol.Foo.evm.deployedBytecode.generatedSources[0].id"),
    ({"A.sol": {"Foo": {"evm": {"deployedBytecode": {"immutableReferences": {"1": [{"start": "0"}]}}}}}},
     "contracts.A.sol.Foo.evm.deployedBytecode.immutableReferences.1[0]"),
])
def test_malformed(contracts, path):
    with pytest.raises(MalformedCatalog) as e:
        ArtifactCatalog.from_contracts(contracts)
    assert str(e.value).startswith(path + ":")
