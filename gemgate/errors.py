class GatewayError(Exception):
    pass

class AddressError(GatewayError, ValueError):
    """A request path or redirect target is not a usable gemini URL."""

class TransportError(GatewayError):
    """The Gemini request itself failed: connection, TLS or framing."""

class UnrecognizedStatus(GatewayError):
    def __init__(self, status, meta=""):
        self.status = status
        self.meta = meta
        super().__init__(f"Unknown status code: {status} {meta}".rstrip())

class RedirectExhaustion(GatewayError):
    def __init__(self, limit):
        self.limit = limit
        super().__init__(f"Too many redirects ({limit})")
