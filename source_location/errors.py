class SourceLocationError(Exception):
    def __init__(self, message):
        self.message = message
        super().__init__(self.message)


class BytecodeFetchFailed(SourceLocationError):
    def __init__(self, address, reason):
        self.address = address
        self.reason = reason
        super().__init__(f"could not retrieve code at {address}: {reason}")


class NoSourceMapFound(SourceLocationError):
    def __init__(self, address):
        self.address = address
        super().__init__(f"no sourcemap associated with the code {address}")


class DecodeFailed(SourceLocationError):
    pass


class MalformedCatalog(SourceLocationError):
    pass


class TraceError(SourceLocationError):
    pass
