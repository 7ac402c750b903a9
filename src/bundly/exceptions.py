class BundlyError(Exception):
    pass


class RpcError(BundlyError):
    """JSON-RPC transport or error-object failure."""

    def __init__(self, message: str, *, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class TransactionFailedError(RpcError):
    """Transaction landed but the program rejected it."""

    def __init__(self, signature: str, err: object) -> None:
        super().__init__(f"Transaction {signature} failed on-chain: {err}")
        self.signature = signature
        self.err = err


class ConfirmationTimeoutError(RpcError):
    def __init__(self, signature: str, attempts: int) -> None:
        super().__init__(f"Transaction {signature} not confirmed after {attempts} polls")
        self.signature = signature


class BundleNotFoundError(BundlyError):
    pass


class MetadataUploadError(BundlyError):
    pass


class GraduationEstimateError(BundlyError):
    """Raised by GraduationEstimate.unwrap() on an error variant."""
