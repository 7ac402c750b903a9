"""Pump.fun bonding-curve graduation estimator.

Predicts the slippage floor (``min_tokens_out``) that finalize_pumpfun
should pass to the program when it spends the escrow on a fresh pump.fun
bonding curve. The program reverts instead of buying at a worse rate.

Constant-product model at the curve's fresh state (no real reserves yet):

    k            = virtual_base * virtual_tokens
    final_tokens = k // (virtual_base + spendable)
    tokens_out   = virtual_tokens - final_tokens

Everything is plain Python ``int`` (arbitrary precision). ``k`` is ~3.2e25
for the pump.fun constants: past u64 and past the 53-bit float mantissa.
Floor division overestimates ``final_tokens``, so ``tokens_out`` errs low.

Pure and side-effect free. Reading the escrow balance and logging the
breakdown are the caller's job (see BundlyAgent.estimate_graduation).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from src.bundly.exceptions import GraduationEstimateError

# Pump.fun initial curve (lamports / raw 6-decimal token units)
PUMPFUN_VIRTUAL_SOL_RESERVES = 30_000_000_000
PUMPFUN_VIRTUAL_TOKEN_RESERVES = 1_073_000_000_000_000
PUMPFUN_INITIAL_REAL_TOKEN_RESERVES = 793_100_000_000_000

# Curve migrates to the AMM once ~85 SOL of real reserves are raised
GRADUATION_THRESHOLD_LAMPORTS = 85_000_000_000

# Deducted by the program before its buy: staking vault rent (~2M)
# + fee vault rent (~2M) + 0.01 SOL buffer, rounded up
ESTIMATED_FIXED_COSTS_LAMPORTS = 14_500_000

# Accept 10% fewer tokens than modeled
SLIPPAGE_NUMERATOR = 90
SLIPPAGE_DENOMINATOR = 100


def _require_int(name: str, value: object) -> None:
    # bool is an int subclass; a float would silently lose precision
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")


def apply_slippage(amount: int) -> int:
    """Integer 90% of ``amount``, truncated."""
    return amount * SLIPPAGE_NUMERATOR // SLIPPAGE_DENOMINATOR


@dataclass(frozen=True)
class CurveConstants:
    """Bonding-curve shape of the external program. Configuration, not state."""

    virtual_base_reserves: int = PUMPFUN_VIRTUAL_SOL_RESERVES
    virtual_token_reserves: int = PUMPFUN_VIRTUAL_TOKEN_RESERVES
    initial_real_token_reserves: int = PUMPFUN_INITIAL_REAL_TOKEN_RESERVES
    graduation_threshold_base: int = GRADUATION_THRESHOLD_LAMPORTS

    def __post_init__(self) -> None:
        _require_int("virtual_base_reserves", self.virtual_base_reserves)
        _require_int("virtual_token_reserves", self.virtual_token_reserves)
        _require_int("initial_real_token_reserves", self.initial_real_token_reserves)
        _require_int("graduation_threshold_base", self.graduation_threshold_base)
        # k = 0 would price every token at zero and hit the ceiling
        for name in ("virtual_base_reserves", "virtual_token_reserves", "initial_real_token_reserves"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.graduation_threshold_base < 0:
            raise ValueError(f"graduation_threshold_base must be non-negative, got {self.graduation_threshold_base}")

    @property
    def invariant(self) -> int:
        """Constant product k at the fresh-curve point."""
        return self.virtual_base_reserves * self.virtual_token_reserves

    @property
    def reserve_ceiling(self) -> int:
        """Largest slippage floor the estimator will ever return."""
        return apply_slippage(self.initial_real_token_reserves)


PUMPFUN_CURVE = CurveConstants()


class EstimationError(str, Enum):
    INSUFFICIENT_ESCROW = "insufficient_escrow"  # escrow <= fixed costs
    DEGENERATE_ESTIMATE = "degenerate_estimate"  # curve constants don't fit the balance


@dataclass(frozen=True)
class GraduationResult:
    """Successful estimate. ``min_tokens_out <= tokens_expected <= initial reserves``."""

    spendable_amount: int
    tokens_expected: int
    min_tokens_out: int
    graduation_reachable: bool
    uncapped_tokens_expected: int
    reserve_ceiling_exceeded: bool = False


@dataclass(frozen=True)
class GraduationEstimate:
    """Tagged outcome: exactly one of ``result`` / ``error`` is set."""

    spendable_amount: int
    result: GraduationResult | None = None
    error: EstimationError | None = None

    @property
    def ok(self) -> bool:
        return self.result is not None

    def unwrap(self) -> GraduationResult:
        if self.result is None:
            raise GraduationEstimateError(
                f"Graduation estimate failed: {self.error.value if self.error else 'unknown'} "
                f"(spendable={self.spendable_amount})"
            )
        return self.result


def estimate(
    escrow_balance: int,
    constants: CurveConstants = PUMPFUN_CURVE,
    estimated_fixed_costs: int = ESTIMATED_FIXED_COSTS_LAMPORTS,
) -> GraduationEstimate:
    """Estimate the finalize slippage floor for ``escrow_balance`` lamports.

    Returns an error variant (never a zero figure posing as a result) when
    nothing is left after fixed costs or the curve yields no tokens.
    """
    _require_int("escrow_balance", escrow_balance)
    _require_int("estimated_fixed_costs", estimated_fixed_costs)
    if escrow_balance < 0:
        raise ValueError(f"escrow_balance must be non-negative, got {escrow_balance}")
    if estimated_fixed_costs < 0:
        raise ValueError(f"estimated_fixed_costs must be non-negative, got {estimated_fixed_costs}")

    spendable = escrow_balance - estimated_fixed_costs
    if spendable <= 0:
        return GraduationEstimate(spendable, error=EstimationError.INSUFFICIENT_ESCROW)

    final_base = constants.virtual_base_reserves + spendable
    if final_base <= 0:
        return GraduationEstimate(spendable, error=EstimationError.DEGENERATE_ESTIMATE)

    final_tokens = constants.invariant // final_base
    tokens_expected = constants.virtual_token_reserves - final_tokens
    if tokens_expected <= 0:
        return GraduationEstimate(spendable, error=EstimationError.DEGENERATE_ESTIMATE)

    uncapped = tokens_expected
    min_tokens_out = apply_slippage(tokens_expected)
    capped = tokens_expected > constants.initial_real_token_reserves
    if capped:
        tokens_expected = constants.initial_real_token_reserves
        min_tokens_out = constants.reserve_ceiling

    return GraduationEstimate(
        spendable,
        result=GraduationResult(
            spendable_amount=spendable,
            tokens_expected=tokens_expected,
            min_tokens_out=min_tokens_out,
            graduation_reachable=spendable >= constants.graduation_threshold_base,
            uncapped_tokens_expected=uncapped,
            reserve_ceiling_exceeded=capped,
        ),
    )
