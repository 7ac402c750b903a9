"""Token metadata upload to IPFS via Pinata.

Image first (multipart pinFileToIPFS), then Metaplex-style JSON
(pinJSONToIPFS) pointing at the image. Both return ``ipfs://<hash>``.
"""

from __future__ import annotations

import mimetypes
from pathlib import Path

import httpx
from loguru import logger
from pydantic import BaseModel, Field

from src.bundly.exceptions import MetadataUploadError

PINATA_API_URL = "https://api.pinata.cloud"


class PinataPinResponse(BaseModel):
    """pinFileToIPFS / pinJSONToIPFS response."""

    IpfsHash: str
    PinSize: int = 0
    Timestamp: str = ""

    model_config = {"extra": "ignore"}


class TokenMetadataFile(BaseModel):
    uri: str
    type: str = "image/png"


class TokenMetadataProperties(BaseModel):
    files: list[TokenMetadataFile] = Field(default_factory=list)
    category: str = "image"
    creators: list[dict] = Field(default_factory=list)


class TokenMetadata(BaseModel):
    """Metaplex off-chain JSON standard."""

    name: str
    symbol: str
    description: str = ""
    image: str
    attributes: list[dict] = Field(default_factory=list)
    properties: TokenMetadataProperties = Field(default_factory=TokenMetadataProperties)


class PinataUploader:
    """Pins images and metadata JSON on Pinata with a JWT."""

    def __init__(self, jwt: str = "", *, base_url: str = PINATA_API_URL, timeout: float = 60.0) -> None:
        self._jwt = jwt
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout)

    @property
    def configured(self) -> bool:
        return bool(self._jwt)

    def _headers(self) -> dict[str, str]:
        if not self._jwt:
            raise MetadataUploadError("No PINATA_JWT or NFT_STORAGE_KEY configured")
        return {"Authorization": f"Bearer {self._jwt}"}

    async def _pin(self, what: str, path: str, **kwargs) -> str:
        headers = self._headers()
        try:
            resp = await self._client.post(path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            raise MetadataUploadError(f"{what} upload failed: {type(e).__name__}: {e}") from e

        if resp.status_code >= 300:
            raise MetadataUploadError(f"{what} upload failed: HTTP {resp.status_code} {resp.text[:200]}")

        pinned = PinataPinResponse.model_validate(resp.json())
        return f"ipfs://{pinned.IpfsHash}"

    async def upload_image(self, image_path: str | Path) -> str:
        path = Path(image_path)
        if not path.is_file():
            raise MetadataUploadError(f"Image file not found: {path}")
        self._headers()

        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        files = {"file": (path.name, path.read_bytes(), content_type)}
        return await self._pin("Image", "/pinning/pinFileToIPFS", files=files)

    async def upload_metadata(self, metadata: TokenMetadata) -> str:
        body = {
            "pinataContent": metadata.model_dump(),
            "pinataMetadata": {"name": f"{metadata.symbol}_metadata.json"},
        }
        return await self._pin("Metadata", "/pinning/pinJSONToIPFS", json=body)

    async def upload_bundle_metadata(
        self,
        *,
        image_path: str | Path,
        name: str,
        symbol: str,
        description: str,
    ) -> str:
        """Upload image then metadata JSON, returns the metadata URI."""
        logger.info(f"[IPFS] Uploading metadata for {name} ({symbol}), image={image_path}")

        image_uri = await self.upload_image(image_path)
        logger.info(f"[IPFS] Image pinned: {image_uri}")

        content_type = mimetypes.guess_type(str(image_path))[0] or "image/png"
        metadata = TokenMetadata(
            name=name,
            symbol=symbol,
            description=description,
            image=image_uri,
            properties=TokenMetadataProperties(
                files=[TokenMetadataFile(uri=image_uri, type=content_type)],
            ),
        )
        metadata_uri = await self.upload_metadata(metadata)
        logger.info(f"[IPFS] Metadata pinned: {metadata_uri}")
        return metadata_uri

    async def close(self) -> None:
        await self._client.aclose()
