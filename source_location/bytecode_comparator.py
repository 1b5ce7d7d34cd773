import re
import logging

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0" * 40

# PUSH20 <zero address> ADDRESS EQ, emitted at the start of a deployed library
LIBRARY_GUARD = "73" + ZERO_ADDRESS + "3014"

PLACEHOLDER_LENGTH = 40

METADATA_PATTERNS = [
    re.compile(r"a165627a7a72305820[0-9a-f]{64}0029$"),  # bzzr0
    re.compile(r"a265627a7a72315820[0-9a-f]{64}64736f6c6343[0-9a-f]{6}0032$"),  # bzzr1
    re.compile(r"a264697066735822[0-9a-f]{68}64736f6c6343[0-9a-f]{6}0033$"),  # ipfs
]


def normalize(code):
    code = (code or "").lower()
    if not code.startswith("0x"):
        code = "0x" + code
    return code


def strip_metadata(code):
    for pattern in METADATA_PATTERNS:
        stripped = pattern.sub("", code)
        if stripped != code:
            return stripped
    return code


def zero_region(code, pos, length):
    if len(code) < pos + length:
        return code
    return code[:pos] + "0" * length + code[pos + length:]


def compare_bytecode(observed, candidate, wildcards=None):
    """
    Check whether the code observed on chain was produced by the candidate bytecode.

    :param observed: hex string of the code found at an address (or the creation input)
    :param candidate: hex string of the compiled bytecode
    :param wildcards: byte regions (start, length) of the candidate whose value is only
        known after deployment, e.g. immutables and linked library addresses
    """
    observed = normalize(observed)
    candidate = normalize(candidate)

    if observed == candidate:
        return candidate != "0x"
    if candidate == "0x":
        # abstract contract or interface
        return False

    if candidate[2:2 + len(LIBRARY_GUARD)] == LIBRARY_GUARD:
        # the deployed library has its own address pushed in place of the zero address
        observed = zero_region(observed, 4, len(ZERO_ADDRESS))

    pos = candidate.find("__")
    while pos != -1:
        if len(candidate) < pos + PLACEHOLDER_LENGTH:
            logger.warning(f"truncated link placeholder at offset {pos} in candidate bytecode")
            return False
        candidate = zero_region(candidate, pos, PLACEHOLDER_LENGTH)
        observed = zero_region(observed, pos, PLACEHOLDER_LENGTH)
        pos = candidate.find("__")

    for start, length in wildcards or []:
        pos = 2 + start * 2
        candidate = zero_region(candidate, pos, length * 2)
        observed = zero_region(observed, pos, length * 2)

    observed = strip_metadata(observed)
    candidate = strip_metadata(candidate)
    if candidate == "0x":
        return False
    return observed.startswith(candidate)
