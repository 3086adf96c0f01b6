"""Configuration settings for the celebrity indexing service."""
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from celebindex.core.exceptions import ConfigurationError


class PipelineConfig(BaseModel):
    """Resolved identifiers the upload and analysis handlers depend on."""
    model_config = ConfigDict(frozen=True)

    bucket: str = Field(..., min_length=1, description="S3 bucket holding uploaded images")
    region: str = Field(..., min_length=1, description="AWS region of the bucket")
    table: str = Field(..., min_length=1, description="DynamoDB table for identity records")
    uploads_table: str = Field(..., min_length=1, description="DynamoDB table for upload records")


class Settings(BaseSettings):
    """Application settings.

    These settings are loaded from environment variables with the following precedence:
    1. Environment variables
    2. .env file
    3. Default values

    Attributes:
        BUCKET: S3 bucket where uploaded images are written (alias: Bucket)
        REGION: Region of the bucket, used to derive public URLs (alias: Region)
        TABLE: DynamoDB table holding one record per recognized identity (alias: Table)
        UPLOADS_TABLE: DynamoDB table holding upload metadata, defaults to TABLE
    """
    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="",
        populate_by_name=True,
    )

    # Core Settings
    PROJECT_NAME: str = "Celebrity Index Service"
    VERSION: str = "0.1.0"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"

    # CORS Settings
    ALLOWED_ORIGINS: str = "http://localhost:3000"

    @property
    def cors_origins(self) -> List[str]:
        """Get list of allowed origins."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    # Pipeline Settings
    BUCKET: str = Field("", validation_alias=AliasChoices("BUCKET", "Bucket"))
    REGION: str = Field("", validation_alias=AliasChoices("REGION", "Region"))
    TABLE: str = Field("", validation_alias=AliasChoices("TABLE", "Table"))
    UPLOADS_TABLE: Optional[str] = None

    # AWS Settings
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""

    # SQS Settings
    SQS_QUEUE_NAME: str = "celebindex-image-created-queue"
    SQS_BATCH_SIZE: int = Field(10, ge=1, le=10)  # ReceiveMessage caps at 10
    SQS_WAIT_TIME_SECONDS: int = Field(20, ge=0, le=20)
    SQS_VISIBILITY_TIMEOUT: int = 60

    # Optional settings with defaults
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    def pipeline_config(self) -> PipelineConfig:
        """Build the handler configuration, failing if any identifier is missing.

        Raises:
            ConfigurationError: If BUCKET, REGION or TABLE is empty
        """
        missing = [
            name for name, value in (
                ("BUCKET", self.BUCKET),
                ("REGION", self.REGION),
                ("TABLE", self.TABLE),
            )
            if not value.strip()
        ]
        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}",
                details={"missing": missing},
            )
        return PipelineConfig(
            bucket=self.BUCKET,
            region=self.REGION,
            table=self.TABLE,
            uploads_table=self.UPLOADS_TABLE or self.TABLE,
        )


settings = Settings()
