"""Graduation estimate for a bundle, the floor finalize would use.

Reads the bundle escrow balance over RPC (or takes it from
--escrow-lamports, offline) and prints the estimate breakdown.
Read-only: no transaction is sent, a wallet key is optional.

Usage:
    python scripts/estimate_graduation.py <BUNDLE_MINT>
    python scripts/estimate_graduation.py --escrow-lamports 100000000000
"""

import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from loguru import logger  # noqa: E402
from solders.keypair import Keypair  # type: ignore[import-untyped]  # noqa: E402

from config.settings import settings  # noqa: E402
from src.bundly.agent import BundlyAgent, lamports_to_sol  # noqa: E402
from src.bundly.graduation import GraduationEstimate, estimate  # noqa: E402
from src.utils.logger import setup_logger  # noqa: E402


def format_estimate(result: GraduationEstimate) -> str:
    lines = [f"spendable:            {result.spendable_amount} lamports"]
    if not result.ok:
        lines.append(f"error:                {result.error.value}")
        return "\n".join(lines)
    est = result.result
    lines += [
        f"spendable (SOL):      {lamports_to_sol(est.spendable_amount)}",
        f"tokens expected:      {est.tokens_expected}",
        f"min tokens out:       {est.min_tokens_out}",
        f"graduation reachable: {est.graduation_reachable}",
    ]
    if est.reserve_ceiling_exceeded:
        lines.append(f"uncapped expected:    {est.uncapped_tokens_expected} (capped at initial reserves)")
    return "\n".join(lines)


async def main() -> None:
    parser = argparse.ArgumentParser(description="Estimate pump.fun graduation for a bundle")
    parser.add_argument("mint", nargs="?", help="Bundle mint address")
    parser.add_argument("--escrow-lamports", type=int, help="Skip RPC and use this escrow balance")
    args = parser.parse_args()

    setup_logger(level=settings.log_level)

    if args.escrow_lamports is not None:
        result = estimate(args.escrow_lamports, estimated_fixed_costs=settings.graduation_fixed_costs_lamports)
    elif args.mint:
        if settings.wallet_private_key:
            agent = BundlyAgent.from_settings()
        else:
            agent = BundlyAgent(
                Keypair(),
                network=settings.solana_network,
                rpc_url=settings.rpc_url,
                estimated_fixed_costs=settings.graduation_fixed_costs_lamports,
            )
        try:
            result = await agent.estimate_graduation(args.mint)
        finally:
            await agent.close()
    else:
        parser.error("either a mint or --escrow-lamports is required")
        return

    logger.info(f"[BUNDLY] Estimate:\n{format_estimate(result)}")


if __name__ == "__main__":
    asyncio.run(main())
