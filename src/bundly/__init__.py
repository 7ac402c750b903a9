from solders.keypair import Keypair  # type: ignore[import-untyped]

from src.bundly.agent import BundlyAgent
from src.bundly.exceptions import (
    BundleNotFoundError,
    BundlyError,
    ConfirmationTimeoutError,
    GraduationEstimateError,
    MetadataUploadError,
    RpcError,
    TransactionFailedError,
)
from src.bundly.graduation import (
    PUMPFUN_CURVE,
    CurveConstants,
    EstimationError,
    GraduationEstimate,
    GraduationResult,
    estimate,
)

VERSION = "0.1.0"


def create_agent(keypair: Keypair | str, *, network: str = "devnet", **kwargs: object) -> BundlyAgent:
    """Shortcut: accepts a Keypair or a base58 secret key."""
    if isinstance(keypair, str):
        keypair = Keypair.from_base58_string(keypair)
    return BundlyAgent(keypair, network=network, **kwargs)


__all__ = [
    "VERSION",
    "BundlyAgent",
    "create_agent",
    "estimate",
    "CurveConstants",
    "PUMPFUN_CURVE",
    "EstimationError",
    "GraduationEstimate",
    "GraduationResult",
    "BundlyError",
    "RpcError",
    "TransactionFailedError",
    "ConfirmationTimeoutError",
    "BundleNotFoundError",
    "MetadataUploadError",
    "GraduationEstimateError",
]
