import codecs

from pydantic import Field, NonNegativeInt, PositiveFloat, PositiveInt, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RequestConfig(BaseSettings):
    """
    Defaults applied to every new request descriptor
    """

    FOLLOW_REDIRECTS: bool = Field(
        description="Whether new requests follow 3xx responses",
        default=True,
    )

    MAX_REDIRECTS: NonNegativeInt | None = Field(
        description="Maximum number of redirects followed by one send, unbounded when unset",
        default=None,
    )

    DEFAULT_ENCODING: str | None = Field(
        description="Text encoding used for response bodies that declare no charset",
        default=None,
    )

    @field_validator("DEFAULT_ENCODING")
    @classmethod
    def validate_default_encoding(cls, v: str | None) -> str | None:
        if not v:
            return None
        try:
            return codecs.lookup(v).name
        except LookupError:
            raise ValueError(f"Unknown text encoding: {v}")


class TransportConfig(BaseSettings):
    """
    Configuration for outbound connections
    """

    HTTP_REQUEST_CONNECT_TIMEOUT: PositiveFloat | None = Field(
        description="Timeout in seconds applied to the socket of each hop, blocking forever when unset",
        default=None,
    )

    HTTP_REQUEST_SSL_VERIFY: bool = Field(
        description="Enable or disable certificate verification for https hops",
        default=True,
    )


class LoggingConfig(BaseSettings):
    """
    Configuration for logging
    """

    LOG_LEVEL: str = Field(
        description="Logging level, default to INFO. Set to DEBUG to trace every hop.",
        default="INFO",
    )

    LOG_FILE: str | None = Field(
        description="File path for log output.",
        default=None,
    )

    LOG_FILE_MAX_SIZE: PositiveInt = Field(
        description="Maximum file size for file rotation retention, the unit is megabytes (MB)",
        default=20,
    )

    LOG_FILE_BACKUP_COUNT: PositiveInt = Field(
        description="Maximum file backup count file rotation retention",
        default=5,
    )

    LOG_FORMAT: str = Field(
        description="Format string for log messages",
        default=(
            "%(asctime)s.%(msecs)03d %(levelname)s [%(threadName)s] "
            "[%(filename)s:%(lineno)d] %(request_id)s - %(message)s"
        ),
    )

    LOG_DATEFORMAT: str | None = Field(
        description="Date format string for log timestamps",
        default=None,
    )


class EngineConfig(RequestConfig, TransportConfig, LoggingConfig):
    model_config = SettingsConfigDict(
        env_prefix="HOPCLIENT_",
        # read from dotenv format config file
        env_file=".env",
        env_file_encoding="utf-8",
        # ignore extra attributes
        extra="ignore",
    )


engine_config: EngineConfig = EngineConfig()

__all__ = ["EngineConfig", "engine_config"]
