"""
配置文件 - 项目配置管理
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AliasChoices, BaseModel, Field, field_validator
from typing import Optional


class StorageSettings(BaseModel):
    """REST 便捷接口使用的默认对象存储，以及下载/客户端参数。"""
    endpoint: Optional[str] = None
    region: Optional[str] = None
    # 目标描述中未给出 region 时的回退值
    default_region: str = "us-east-1"
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    bucket: Optional[str] = None
    # DownloadAction 未指定 contentUrl 时的本地落盘目录
    download_dir: str = "/tmp"
    # Hetzner/MinIO 等兼容存储需要 path-style
    addressing_style: str = "path"
    signature_version: str = "s3v4"


class RegistrySettings(BaseModel):
    timeout: float = 10.0
    max_retries: int = 2
    directory: Optional[str] = None
    binary: str = "s3service"


class TracingSettings(BaseModel):
    enabled: bool = False
    service_name: str = "s3service"


class StateSettings(BaseModel):
    max_operations: int = 100


class Settings(BaseSettings):
    """项目配置"""

    # 基础配置
    PROJECT_NAME: str = "S3 Object Storage Service"
    SERVICE_ID: str = "s3service"
    DESCRIPTION: str = "S3-compatible object storage with support for AWS S3, Hetzner, and others"
    VERSION: str = "1.0.0"
    API_VERSION: str = "v1"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    HOST: str = "0.0.0.0"
    PORT: int = 8092
    API_PREFIX: str = "/v1/api"

    # 静态 API Key；未配置时接口开放（开发模式）
    API_KEY: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("API_KEY", "S3_API_KEY"),
    )

    # 注册中心地址；未配置则跳过自动注册
    REGISTRYSERVICE_API_URL: Optional[str] = None

    # CORS配置
    CORS_ORIGINS: list = Field(default=["*"])

    # 分组配置：采用嵌套模型，环境变量使用 "__" 分隔（如 STORAGE__BUCKET）
    storage: StorageSettings = Field(default_factory=StorageSettings)
    registry: RegistrySettings = Field(default_factory=RegistrySettings)
    tracing: TracingSettings = Field(default_factory=TracingSettings)
    state: StateSettings = Field(default_factory=StateSettings)

    # 日志/请求体记录配置
    LOG_REQUEST_BODY_ENABLE_BY_DEFAULT: bool = True
    LOG_REQUEST_BODY_MAX_BYTES: int = 2048

    # pydantic-settings v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="allow",
        env_nested_delimiter="__",
        populate_by_name=True,
    )

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v):
        """允许 JSON 字符串或逗号分隔字符串两种格式。"""
        if isinstance(v, list):
            return v
        if isinstance(v, str):
            s = v.strip()
            if s.startswith("[") and s.endswith("]"):
                import json
                try:
                    arr = json.loads(s)
                    if isinstance(arr, list):
                        return arr
                except Exception:
                    pass
            if "," in s:
                return [item.strip() for item in s.split(",") if item.strip()]
            return [s]
        return v


settings = Settings()
