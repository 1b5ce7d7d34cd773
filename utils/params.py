OUTPUT_PATH = "./output"

# node used to fetch the code of the traced contracts
RPC_URL = "http://localhost:8545"

BLOCK_IDENTIFIER = "latest"

# expose the sources generated by the compiler (yul helpers) to the debugger
DEBUG_WITH_GENERATED_SOURCES = False
