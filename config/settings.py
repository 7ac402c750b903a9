from pydantic_settings import BaseSettings, SettingsConfigDict

RPC_ENDPOINTS = {
    "devnet": "https://api.devnet.solana.com",
    "mainnet": "https://api.mainnet-beta.solana.com",
}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Solana connection
    solana_network: str = "devnet"  # "devnet" | "mainnet"
    solana_rpc_url: str = ""  # empty = public endpoint for solana_network
    solana_commitment: str = "confirmed"

    # Confirmation polling (getSignatureStatuses)
    confirmation_retries: int = 30
    confirmation_retry_delay_sec: float = 2.0

    # Agent wallet, base58 secret key, NEVER LOG THIS
    wallet_private_key: str = ""

    # Bundly program
    bundly_program_id: str = "GVGCNqUUrix5RLph9kVtzdMYkZLEvzvHEkYvC6vJ9dzZ"

    # finalize_pumpfun
    finalize_compute_unit_limit: int = 1_400_000
    graduation_fixed_costs_lamports: int = 14_500_000  # staking rent + fee rent + 0.01 SOL buffer

    # Claw social/auth service
    claw_base_url: str = "https://claw.bundly.fun"

    # IPFS pinning (Pinata). NFT_STORAGE_KEY accepted as a fallback name.
    pinata_jwt: str = ""
    nft_storage_key: str = ""

    # Logging
    log_level: str = "INFO"

    @property
    def rpc_url(self) -> str:
        """Explicit RPC URL, else the public endpoint of the configured network."""
        if self.solana_rpc_url:
            return self.solana_rpc_url
        try:
            return RPC_ENDPOINTS[self.solana_network]
        except KeyError:
            raise ValueError(f"Unknown solana_network: {self.solana_network!r}") from None

    @property
    def ipfs_jwt(self) -> str:
        return self.pinata_jwt or self.nft_storage_key


settings = Settings()
