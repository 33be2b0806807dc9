from pydantic import BaseModel, ConfigDict, Field


class UploadResponse(BaseModel):
    ipfs_url: str


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
    service: str


class PinataPinResponse(BaseModel):
    """Body returned by Pinata's pinFileToIPFS on success."""

    model_config = ConfigDict(populate_by_name=True)

    ipfs_hash: str = Field(alias="IpfsHash", min_length=1)
    pin_size: int | None = Field(default=None, alias="PinSize")
    timestamp: str | None = Field(default=None, alias="Timestamp")
    is_duplicate: bool | None = Field(default=None, alias="isDuplicate")
