"""BundlyAgent: high-level async client for the Bundly program.

Wraps instruction building, signing and confirmation behind one object
holding the agent wallet. The private key is loaded once and never
logged; only the public key shows up in logs and __repr__.

UI amounts (SOL, bundle tokens) are converted to raw units through
Decimal. Passing a float works but goes through str() first.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from decimal import ROUND_DOWN, Decimal, InvalidOperation
from pathlib import Path
from typing import Sequence, Union

from loguru import logger
from solders.instruction import Instruction  # type: ignore[import-untyped]
from solders.keypair import Keypair  # type: ignore[import-untyped]
from solders.message import MessageV0  # type: ignore[import-untyped]
from solders.pubkey import Pubkey  # type: ignore[import-untyped]
from solders.transaction import VersionedTransaction  # type: ignore[import-untyped]

from config.settings import RPC_ENDPOINTS, Settings, settings
from src.bundly.constants import (
    BUNDLY_PROGRAM_ID,
    DEFAULT_UNSTAKE_COOLDOWN_SEC,
    FINALIZE_COMPUTE_UNIT_LIMIT,
    LAMPORTS_PER_SOL,
    TOKEN_DECIMALS,
)
from src.bundly.exceptions import BundleNotFoundError, RpcError
from src.bundly.graduation import (
    ESTIMATED_FIXED_COSTS_LAMPORTS,
    PUMPFUN_CURVE,
    CurveConstants,
    GraduationEstimate,
    estimate,
)
from src.bundly.instructions import (
    build_cancel_order,
    build_claim_rewards,
    build_collect_pump_amm_fees,
    build_collect_pump_fees,
    build_create_order,
    build_deposit_stake,
    build_execute_unstake,
    build_fill_order,
    build_finalize_pumpfun,
    build_init_bundle,
    build_prepare_unstake,
    build_presale_exit,
    build_swap,
    build_withdraw_unstaked,
    create_associated_token_account,
    set_compute_unit_limit,
)
from src.bundly.metadata import PinataUploader
from src.bundly.pda import (
    derive_bundle_pda,
    derive_escrow_pda,
    derive_user_stake_pda,
    get_associated_token_address,
)
from src.bundly.rpc import SolanaRpcClient

AmountLike = Union[Decimal, int, float, str]
PubkeyLike = Union[Pubkey, str]

SOL_DECIMALS = 9


def to_base_units(amount: AmountLike, decimals: int) -> int:
    """UI amount -> raw integer units, truncated. Must be positive."""
    if isinstance(amount, bool):
        raise TypeError("amount must be a number, got bool")
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {amount!r}") from None
    if not value.is_finite() or value <= 0:
        raise ValueError(f"amount must be positive, got {amount}")
    raw = int((value * (Decimal(10) ** decimals)).to_integral_value(rounding=ROUND_DOWN))
    if raw == 0:
        raise ValueError(f"amount {amount} is below the smallest unit (10^-{decimals})")
    return raw


def sol_to_lamports(amount: AmountLike) -> int:
    return to_base_units(amount, SOL_DECIMALS)


def tokens_to_raw(amount: AmountLike, decimals: int = TOKEN_DECIMALS) -> int:
    return to_base_units(amount, decimals)


def lamports_to_sol(lamports: int) -> Decimal:
    return Decimal(lamports) / LAMPORTS_PER_SOL


def _pubkey(value: PubkeyLike) -> Pubkey:
    return value if isinstance(value, Pubkey) else Pubkey.from_string(value)


@dataclass(frozen=True)
class BundleCreated:
    signature: str
    mint: Pubkey
    bundle: Pubkey
    escrow: Pubkey


@dataclass(frozen=True)
class FinalizeResult:
    signature: str
    pumpfun_mint: Pubkey
    metadata_uri: str
    min_tokens_out: int
    estimate: GraduationEstimate | None = None


@dataclass(frozen=True)
class OrderCreated:
    signature: str
    order: Pubkey
    id_seed: int


@dataclass(frozen=True)
class BundleHolding:
    mint: str
    balance: Decimal


@dataclass(frozen=True)
class StakingInfo:
    """User stake account. ``data`` is the raw Anchor account, undecoded."""

    user_stake: Pubkey
    exists: bool
    lamports: int = 0
    data: bytes = field(default=b"", repr=False)


@dataclass(frozen=True)
class BundleState:
    mint: Pubkey
    bundle: Pubkey
    owner: str
    lamports: int
    data: bytes = field(default=b"", repr=False)


class BundlyAgent:
    """Agent wallet + RPC connection for every Bundly operation."""

    def __init__(
        self,
        keypair: Keypair,
        *,
        network: str = "devnet",
        rpc_url: str | None = None,
        commitment: str = "confirmed",
        program_id: Pubkey = BUNDLY_PROGRAM_ID,
        confirmation_retries: int = 30,
        confirmation_retry_delay_sec: float = 2.0,
        ipfs_jwt: str = "",
        curve: CurveConstants = PUMPFUN_CURVE,
        estimated_fixed_costs: int = ESTIMATED_FIXED_COSTS_LAMPORTS,
        compute_unit_limit: int = FINALIZE_COMPUTE_UNIT_LIMIT,
        rpc: SolanaRpcClient | None = None,
        uploader: PinataUploader | None = None,
    ) -> None:
        if keypair is None:
            raise ValueError("Wallet keypair is required")
        if rpc_url is None:
            if network not in RPC_ENDPOINTS:
                raise ValueError(f"Unknown network: {network!r}")
            rpc_url = RPC_ENDPOINTS[network]

        self._keypair = keypair
        self._network = network
        self._program_id = program_id
        self._curve = curve
        self._estimated_fixed_costs = estimated_fixed_costs
        self._compute_unit_limit = compute_unit_limit
        self._rpc = rpc if rpc is not None else SolanaRpcClient(
            rpc_url,
            commitment=commitment,
            confirm_retries=confirmation_retries,
            confirm_delay_sec=confirmation_retry_delay_sec,
        )
        self._uploader = uploader if uploader is not None else PinataUploader(ipfs_jwt)

        logger.info(f"[BUNDLY] Agent initialized: wallet={self.pubkey_str} network={network} rpc={rpc_url}")

    @classmethod
    def from_settings(cls, cfg: Settings | None = None) -> BundlyAgent:
        """Build an agent from env / .env configuration."""
        cfg = cfg or settings
        if not cfg.wallet_private_key:
            raise ValueError("Wallet private key is empty")
        return cls(
            Keypair.from_base58_string(cfg.wallet_private_key),
            network=cfg.solana_network,
            rpc_url=cfg.rpc_url,
            commitment=cfg.solana_commitment,
            program_id=Pubkey.from_string(cfg.bundly_program_id),
            confirmation_retries=cfg.confirmation_retries,
            confirmation_retry_delay_sec=cfg.confirmation_retry_delay_sec,
            ipfs_jwt=cfg.ipfs_jwt,
            estimated_fixed_costs=cfg.graduation_fixed_costs_lamports,
            compute_unit_limit=cfg.finalize_compute_unit_limit,
        )

    def __repr__(self) -> str:
        return f"BundlyAgent(pubkey={self.pubkey_str}, network={self._network})"

    @property
    def pubkey(self) -> Pubkey:
        return self._keypair.pubkey()

    @property
    def pubkey_str(self) -> str:
        return str(self._keypair.pubkey())

    @property
    def network(self) -> str:
        return self._network

    @property
    def rpc(self) -> SolanaRpcClient:
        return self._rpc

    # ─── Balances ────────────────────────────────────────────────────

    async def get_balance(self) -> Decimal:
        """Wallet balance in SOL."""
        return lamports_to_sol(await self._rpc.get_balance(self.pubkey))

    async def _get_raw_token_balance(self, mint: Pubkey) -> int:
        ata = get_associated_token_address(self.pubkey, mint)
        try:
            balance = await self._rpc.get_token_account_balance(ata)
        except RpcError as e:
            # Missing ATA comes back as an RPC error
            logger.debug(f"[BUNDLY] No token balance for {mint}: {e}")
            return 0
        return balance.amount

    async def get_token_balance(self, mint: PubkeyLike) -> Decimal:
        """Wallet balance of ``mint`` in UI units, 0 if there is no ATA."""
        raw = await self._get_raw_token_balance(_pubkey(mint))
        return Decimal(raw) / (Decimal(10) ** TOKEN_DECIMALS)

    async def get_my_bundles(self) -> list[BundleHolding]:
        """Every SPL token the wallet holds a non-zero balance of."""
        holdings: list[BundleHolding] = []
        for account in await self._rpc.get_token_accounts_by_owner(self.pubkey):
            info = account["account"]["data"]["parsed"]["info"]
            amount = info["tokenAmount"]
            balance = Decimal(amount.get("uiAmountString") or "0")
            if balance > 0:
                holdings.append(BundleHolding(mint=info["mint"], balance=balance))
        return holdings

    async def request_airdrop(self, amount_sol: AmountLike = 1) -> str:
        if self._network != "devnet":
            raise ValueError("Airdrops only available on devnet")
        lamports = sol_to_lamports(amount_sol)
        logger.info(f"[BUNDLY] Requesting {amount_sol} SOL airdrop")
        signature = await self._rpc.request_airdrop(self.pubkey, lamports)
        await self._rpc.confirm_transaction(signature)
        logger.info(f"[BUNDLY] Airdrop confirmed: {signature}")
        return signature

    # ─── Bundle lifecycle ────────────────────────────────────────────

    async def create_bundle(
        self,
        *,
        cap_sol: AmountLike,
        total_supply: AmountLike,
        name: str | None = None,
        symbol: str | None = None,
        nonce: int | None = None,
        decimals: int = TOKEN_DECIMALS,
        unstake_cooldown: int = DEFAULT_UNSTAKE_COOLDOWN_SEC,
    ) -> BundleCreated:
        """Create a bundle fundraiser. ``name``/``symbol`` are only logged here,
        they are set on-chain at finalize."""
        if cap_sol is None or total_supply is None:
            raise ValueError("cap_sol and total_supply are required")
        cap_lamports = sol_to_lamports(cap_sol)
        raw_supply = to_base_units(total_supply, decimals)
        if nonce is None:
            nonce = int(time.time() * 1000)

        logger.info(
            f"[BUNDLY] Creating bundle name={name or 'N/A'} symbol={symbol or 'N/A'} "
            f"cap={cap_sol} SOL supply={total_supply} cooldown={unstake_cooldown / 3600:g}h"
        )
        built = build_init_bundle(
            creator=self.pubkey,
            nonce=nonce,
            cap_lamports=cap_lamports,
            total_supply=raw_supply,
            decimals=decimals,
            unstake_cooldown=unstake_cooldown,
            program_id=self._program_id,
        )
        signature = await self.send_and_confirm([built.instruction])
        created = BundleCreated(
            signature=signature,
            mint=built.addresses["mint"],
            bundle=built.addresses["bundle"],
            escrow=built.addresses["escrow"],
        )
        logger.info(f"[BUNDLY] Bundle created: mint={created.mint} bundle={created.bundle}")
        return created

    async def estimate_graduation(self, mint: PubkeyLike) -> GraduationEstimate:
        """Read the escrow balance and estimate the finalize slippage floor."""
        escrow, _ = derive_escrow_pda(_pubkey(mint))
        escrow_balance = await self._rpc.get_balance(escrow)
        result = estimate(escrow_balance, self._curve, self._estimated_fixed_costs)

        logger.info(f"[BUNDLY] Escrow balance: {lamports_to_sol(escrow_balance)} SOL ({escrow_balance} lamports)")
        if not result.ok:
            logger.warning(
                f"[BUNDLY] Graduation estimate unavailable: {result.error.value} "
                f"(spendable={result.spendable_amount} lamports)"
            )
            return result

        est = result.result
        logger.info(
            f"[BUNDLY] Spendable after fixed costs: {lamports_to_sol(est.spendable_amount)} SOL, "
            f"expected tokens: {est.tokens_expected}, min tokens out: {est.min_tokens_out}"
        )
        if est.reserve_ceiling_exceeded:
            logger.info(
                f"[BUNDLY] Curve model gives {est.uncapped_tokens_expected} tokens, "
                f"capped at initial real reserves {self._curve.initial_real_token_reserves}"
            )
        if est.graduation_reachable:
            logger.info("[BUNDLY] Escrow reaches the graduation threshold, curve should migrate")
        else:
            logger.info(
                f"[BUNDLY] Escrow below graduation threshold "
                f"({lamports_to_sol(self._curve.graduation_threshold_base)} SOL), token stays on the curve"
            )
        return result

    async def finalize(
        self,
        mint: PubkeyLike,
        *,
        name: str,
        symbol: str,
        description: str | None = None,
        image_path: str | Path | None = None,
        metadata_uri: str | None = None,
        min_tokens_out: int | None = None,
        require_slippage_protection: bool = False,
    ) -> FinalizeResult:
        """Spend the escrow launching the bundle on pump.fun.

        Uploads metadata when ``metadata_uri`` is not given. Unless
        ``min_tokens_out`` is passed explicitly, the slippage floor comes
        from estimate_graduation(). An estimate error falls back to a zero
        floor with a warning, or raises GraduationEstimateError when
        ``require_slippage_protection`` is set.
        """
        mint_pk = _pubkey(mint)
        if not name or not symbol:
            raise ValueError("name and symbol are required")

        logger.info(f"[BUNDLY] Finalizing bundle {mint_pk} as {name} ({symbol}) on pump.fun")

        if not metadata_uri:
            if not (image_path and description):
                raise ValueError("Either metadata_uri OR (image_path + name + symbol + description) required")
            metadata_uri = await self._uploader.upload_bundle_metadata(
                image_path=image_path, name=name, symbol=symbol, description=description
            )
        logger.info(f"[BUNDLY] Metadata URI: {metadata_uri}")

        pumpfun_mint = Keypair()
        logger.info(f"[BUNDLY] Generated pump.fun mint: {pumpfun_mint.pubkey()}")

        estimate_result: GraduationEstimate | None = None
        if min_tokens_out is None:
            estimate_result = await self.estimate_graduation(mint_pk)
            if estimate_result.ok:
                min_tokens_out = estimate_result.result.min_tokens_out
            elif require_slippage_protection:
                estimate_result.unwrap()
            else:
                logger.warning("[BUNDLY] Finalizing WITHOUT slippage protection (min_tokens_out=0)")
                min_tokens_out = 0

        built = build_finalize_pumpfun(
            mint=mint_pk,
            payer=self.pubkey,
            pumpfun_mint=pumpfun_mint.pubkey(),
            token_name=name,
            token_symbol=symbol,
            token_uri=metadata_uri,
            min_tokens_out=min_tokens_out,
            program_id=self._program_id,
        )
        signature = await self.send_and_confirm(
            [set_compute_unit_limit(self._compute_unit_limit), built.instruction],
            extra_signers=[pumpfun_mint],
        )
        logger.info(f"[BUNDLY] Bundle finalized: pump.fun mint={pumpfun_mint.pubkey()} sig={signature}")
        return FinalizeResult(
            signature=signature,
            pumpfun_mint=pumpfun_mint.pubkey(),
            metadata_uri=metadata_uri,
            min_tokens_out=min_tokens_out,
            estimate=estimate_result,
        )

    # ─── Presale ─────────────────────────────────────────────────────

    async def buy(self, mint: PubkeyLike, *, sol_amount: AmountLike, min_tokens_out: int = 0) -> str:
        mint_pk = _pubkey(mint)
        lamports = sol_to_lamports(sol_amount)
        logger.info(f"[BUNDLY] Buying {mint_pk}: {sol_amount} SOL ({lamports} lamports), min out {min_tokens_out}")

        instructions: list[Instruction] = []
        ata = get_associated_token_address(self.pubkey, mint_pk)
        if await self._rpc.get_account_info(ata) is None:
            logger.info("[BUNDLY] Creating associated token account")
            instructions.append(create_associated_token_account(self.pubkey, self.pubkey, mint_pk))

        built = build_swap(
            mint=mint_pk,
            user=self.pubkey,
            amount_lamports=lamports,
            min_tokens_out=min_tokens_out,
            program_id=self._program_id,
        )
        instructions.append(built.instruction)
        signature = await self.send_and_confirm(instructions)
        logger.info(f"[BUNDLY] Bought tokens: {signature}")
        return signature

    async def presale_exit(self, mint: PubkeyLike, amount: AmountLike | None = None) -> str:
        """Burn bundle tokens for SOL back. Exits the whole position when
        ``amount`` is omitted. The 1% protocol fee is deducted on-chain."""
        mint_pk = _pubkey(mint)
        if amount is None:
            raw = await self._get_raw_token_balance(mint_pk)
            if raw <= 0:
                raise ValueError("No bundle tokens to exit")
        else:
            raw = tokens_to_raw(amount)

        logger.info(f"[BUNDLY] Exiting presale {mint_pk}: {Decimal(raw) / 10**TOKEN_DECIMALS} tokens")
        built = build_presale_exit(
            mint=mint_pk, user=self.pubkey, amount_btoken=raw, program_id=self._program_id
        )
        signature = await self.send_and_confirm([built.instruction])
        logger.info(f"[BUNDLY] Exited presale: {signature}")
        return signature

    # ─── Staking ─────────────────────────────────────────────────────

    async def stake(self, mint: PubkeyLike, amount: AmountLike) -> str:
        mint_pk = _pubkey(mint)
        raw = tokens_to_raw(amount)
        logger.info(f"[BUNDLY] Staking {amount} tokens of {mint_pk}")
        built = build_deposit_stake(mint=mint_pk, user=self.pubkey, amount=raw, program_id=self._program_id)
        return await self.send_and_confirm([built.instruction])

    async def prepare_unstake(self, mint: PubkeyLike) -> str:
        mint_pk = _pubkey(mint)
        logger.info(f"[BUNDLY] Preparing unstake of {mint_pk}, cooldown starts")
        built = build_prepare_unstake(mint=mint_pk, user=self.pubkey, program_id=self._program_id)
        return await self.send_and_confirm([built.instruction])

    async def execute_unstake(self, mint: PubkeyLike, amount: AmountLike) -> str:
        mint_pk = _pubkey(mint)
        raw = tokens_to_raw(amount)
        logger.info(f"[BUNDLY] Executing unstake of {amount} tokens of {mint_pk}")
        built = build_execute_unstake(
            mint=mint_pk, user=self.pubkey, amount_btoken=raw, program_id=self._program_id
        )
        return await self.send_and_confirm([built.instruction])

    async def withdraw_unstaked(self, mint: PubkeyLike, destination: PubkeyLike | None = None) -> str:
        mint_pk = _pubkey(mint)
        logger.info(f"[BUNDLY] Withdrawing unstaked tokens of {mint_pk}")
        built = build_withdraw_unstaked(
            mint=mint_pk,
            user=self.pubkey,
            destination=_pubkey(destination) if destination is not None else None,
            program_id=self._program_id,
        )
        return await self.send_and_confirm([built.instruction])

    async def claim_rewards(self, mint: PubkeyLike) -> str:
        mint_pk = _pubkey(mint)
        logger.info(f"[BUNDLY] Claiming rewards for {mint_pk}")
        built = build_claim_rewards(mint=mint_pk, user=self.pubkey, program_id=self._program_id)
        return await self.send_and_confirm([built.instruction])

    async def get_staking_info(self, mint: PubkeyLike) -> StakingInfo:
        bundle, _ = derive_bundle_pda(_pubkey(mint))
        user_stake, _ = derive_user_stake_pda(bundle, self.pubkey)
        account = await self._rpc.get_account_info(user_stake)
        if account is None:
            return StakingInfo(user_stake=user_stake, exists=False)
        return StakingInfo(user_stake=user_stake, exists=True, lamports=account.lamports, data=account.data)

    # ─── Creator fees ────────────────────────────────────────────────

    async def collect_pump_fees(self, mint: PubkeyLike) -> str:
        """Pump.fun creator fees (SOL) into the bundle fee vault."""
        mint_pk = _pubkey(mint)
        logger.info(f"[BUNDLY] Collecting pump.fun creator fees for {mint_pk}")
        built = build_collect_pump_fees(mint=mint_pk, collector=self.pubkey, program_id=self._program_id)
        return await self.send_and_confirm([built.instruction])

    async def collect_pump_amm_fees(self, mint: PubkeyLike) -> str:
        """Pump AMM creator fees (WSOL), after graduation."""
        mint_pk = _pubkey(mint)
        logger.info(f"[BUNDLY] Collecting pump AMM creator fees for {mint_pk}")
        built = build_collect_pump_amm_fees(mint=mint_pk, collector=self.pubkey, program_id=self._program_id)
        return await self.send_and_confirm([built.instruction])

    # ─── OTC orders ──────────────────────────────────────────────────

    async def create_order(
        self,
        mint: PubkeyLike,
        *,
        amount: int,
        price: int,
        is_buy_side: bool,
        id_seed: int | None = None,
    ) -> OrderCreated:
        """Open an OTC order. ``amount`` and ``price`` are raw units."""
        if not amount or not price or amount <= 0 or price <= 0:
            raise ValueError("amount and price are required")
        mint_pk = _pubkey(mint)
        if id_seed is None:
            id_seed = int(time.time() * 1000)

        logger.info(
            f"[BUNDLY] Creating OTC {'BUY' if is_buy_side else 'SELL'} order on {mint_pk}: "
            f"amount={amount} price={price}"
        )
        built = build_create_order(
            mint=mint_pk,
            maker=self.pubkey,
            amount=amount,
            price=price,
            is_buy_side=is_buy_side,
            id_seed=id_seed,
            program_id=self._program_id,
        )
        signature = await self.send_and_confirm([built.instruction])
        order = built.addresses["order"]
        logger.info(f"[BUNDLY] Order created: {order}")
        return OrderCreated(signature=signature, order=order, id_seed=id_seed)

    async def fill_order(self, mint: PubkeyLike, maker: PubkeyLike, order: PubkeyLike) -> str:
        logger.info(f"[BUNDLY] Filling OTC order {order}")
        built = build_fill_order(
            mint=_pubkey(mint),
            taker=self.pubkey,
            maker=_pubkey(maker),
            order=_pubkey(order),
            program_id=self._program_id,
        )
        return await self.send_and_confirm([built.instruction])

    async def cancel_order(self, mint: PubkeyLike, order: PubkeyLike) -> str:
        logger.info(f"[BUNDLY] Canceling OTC order {order}")
        built = build_cancel_order(
            mint=_pubkey(mint), maker=self.pubkey, order=_pubkey(order), program_id=self._program_id
        )
        return await self.send_and_confirm([built.instruction])

    # ─── State ───────────────────────────────────────────────────────

    async def get_bundle_state(self, mint: PubkeyLike) -> BundleState:
        mint_pk = _pubkey(mint)
        bundle, _ = derive_bundle_pda(mint_pk)
        account = await self._rpc.get_account_info(bundle)
        if account is None:
            raise BundleNotFoundError(f"Bundle not found on-chain: {mint_pk}")
        return BundleState(
            mint=mint_pk,
            bundle=bundle,
            owner=account.owner,
            lamports=account.lamports,
            data=account.data,
        )

    # ─── Transactions ────────────────────────────────────────────────

    async def send_and_confirm(
        self,
        instructions: Sequence[Instruction],
        extra_signers: Sequence[Keypair] = (),
    ) -> str:
        """Compile, sign (wallet pays), send and wait for confirmation."""
        blockhash, _ = await self._rpc.get_latest_blockhash()
        msg = MessageV0.try_compile(
            payer=self.pubkey,
            instructions=list(instructions),
            address_lookup_table_accounts=[],
            recent_blockhash=blockhash,
        )
        tx = VersionedTransaction(msg, [self._keypair, *extra_signers])

        signature = await self._rpc.send_transaction(tx)
        logger.info(f"[BUNDLY] TX sent: {signature}, confirming")
        await self._rpc.confirm_transaction(signature)
        logger.info(f"[BUNDLY] TX confirmed: {signature}")
        return signature

    async def close(self) -> None:
        await self._rpc.close()
        await self._uploader.close()
