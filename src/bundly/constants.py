"""Program IDs, PDA seeds and protocol constants for the deployed Bundly program."""

from solders.pubkey import Pubkey  # type: ignore[import-untyped]

# Bundly program (deployed on Solana)
BUNDLY_PROGRAM_ID = Pubkey.from_string("GVGCNqUUrix5RLph9kVtzdMYkZLEvzvHEkYvC6vJ9dzZ")

# Receives the 1% protocol tax (hardcoded in the program)
GLOBAL_FEE_WALLET = Pubkey.from_string("6XFV7TXxD28m7h3Ty483TH3thhsUoKhNF5dTHdF5JMSu")

# ─── PDA seeds (must match the program) ───────────────────────────────

BUNDLE_SEED = b"bundle_v2"
ESCROW_SEED = b"escrow_v2"
TOKEN_VAULT_SEED = b"vault_v2"
FEE_VAULT_SEED = b"fee_vault_v1"
FEE_SOL_VAULT_SEED = b"fee_sol_v1"
STAKING_VAULT_SEED = b"staking_vault_v1"
UNSTAKE_VAULT_SEED = b"unstake_vault_v2"
UNSTAKE_REQUEST_SEED = b"unstake_request_v1"
USER_STAKE_SEED = b"user_stake_v1"
MINT_SEED = b"bundle_mint_v1"
ORDER_SEED = b"order_v1"
ORDER_VAULT_SEED = b"vault_v2"

# ─── Token / protocol constants ───────────────────────────────────────

TOKEN_DECIMALS = 6
LAMPORTS_PER_SOL = 1_000_000_000

PROTOCOL_TAX_BPS = 100  # 1%
MIN_SWAP_AMOUNT = 100_000  # 0.0001 SOL
MIN_STAKE_AMOUNT = 1_000_000  # 1 token

DEFAULT_UNSTAKE_COOLDOWN_SEC = 86_400
FINALIZE_COMPUTE_UNIT_LIMIT = 1_400_000

# ─── Solana programs ──────────────────────────────────────────────────

SYSTEM_PROGRAM_ID = Pubkey.from_string("11111111111111111111111111111111")
TOKEN_PROGRAM_ID = Pubkey.from_string("TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA")
ASSOCIATED_TOKEN_PROGRAM_ID = Pubkey.from_string(
    "ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL"
)
RENT_SYSVAR_ID = Pubkey.from_string("SysvarRent111111111111111111111111111111111")
COMPUTE_BUDGET_PROGRAM_ID = Pubkey.from_string("ComputeBudget111111111111111111111111111111")
METADATA_PROGRAM_ID = Pubkey.from_string("metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s")
WSOL_MINT = Pubkey.from_string("So11111111111111111111111111111111111111112")

# ─── Pump.fun (bonding curve) ─────────────────────────────────────────

PUMPFUN_PROGRAM_ID = Pubkey.from_string("6EF8rrecthR5Dkzon8Nwu78hRvfCKubJ14M5uBEwF6P")
PUMPFUN_GLOBAL = Pubkey.from_string("4wTV1YmiEkRvAtNtsSGPtUrqRYQMe5SKy2uB4Jjaxnjf")
PUMPFUN_MINT_AUTHORITY = Pubkey.from_string("TSLvdd1pWpHVjahSpsvCXUbgwsL3JAcvokwaKt1eokM")
PUMPFUN_FEE_RECIPIENT = Pubkey.from_string("62qc2CNXwrYqQScmEdiZFFAnJR262PxWEuNQtxfafNgV")
PUMPFUN_GLOBAL_VOLUME = Pubkey.from_string("Hq2wp8uJ9jCPsYgNHex8RtqdvMPfVGoYwjvF1ATiwn2Y")
PUMPFUN_FEE_PROGRAM = Pubkey.from_string("pfeeUxB6jkeY1Hxd7CsFCAjcbHA9rWtchMGdZ6VojVZ")
PUMPFUN_EVENT_AUTHORITY = Pubkey.from_string("Ce6TQqeHC9p8KetsN6JsjHK7UTZk7nasjjnr7XxXp9F1")

BONDING_CURVE_SEED = b"bonding-curve"
METADATA_SEED = b"metadata"
CREATOR_VAULT_SEED = b"creator-vault"
USER_VOLUME_SEED = b"user_volume_accumulator"
FEE_CONFIG_SEED = b"fee_config"

# ─── Pump AMM (post-graduation pool) ──────────────────────────────────

PUMP_AMM_PROGRAM_ID = Pubkey.from_string("pAMMBay6oceH9fJKBRHGP5D4bD4sWpmSwMn52FMfXEA")
PUMP_AMM_EVENT_AUTHORITY = Pubkey.from_string("GS4CU59F31iL7aR2Q8zVS8DRrcRnXX1yjQ66TqNVQnaR")
AMM_CREATOR_VAULT_SEED = b"creator_vault"
