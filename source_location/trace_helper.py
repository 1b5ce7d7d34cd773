CREATION_MARKER = "(Contract Creation - Step"


def contract_creation_token(step):
    return f"{CREATION_MARKER} {step})"


def is_contract_creation(address):
    return CREATION_MARKER in address


def address_key(address):
    # deployed addresses are hex and compare case-insensitively, creation tokens are kept as is
    if is_contract_creation(address):
        return address
    return address.lower()
