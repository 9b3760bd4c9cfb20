"""
数据传输对象（DTO）- JSON-LD 语义动作信封与 REST 请求体
"""
from pydantic import BaseModel, ConfigDict, Field, model_serializer
from typing import Any, ClassVar, Literal, Optional
from datetime import datetime, timezone

from domain.action import ActionKind


class DTOBase(BaseModel):
    """Base DTO: unify datetime serialization to UTC-Z for all subclasses."""

    @model_serializer(mode="wrap")
    def _serialize_model(self, handler):  # type: ignore[override]
        data = handler(self)

        def convert(value):
            if isinstance(value, datetime):
                ts = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
                s = ts.astimezone(timezone.utc).isoformat()
                return s.replace("+00:00", "Z")
            if isinstance(value, list):
                return [convert(v) for v in value]
            if isinstance(value, tuple):
                return tuple(convert(v) for v in value)
            if isinstance(value, dict):
                return {k: convert(v) for k, v in value.items()}
            return value

        return convert(data)


class JsonLdDTO(DTOBase):
    """JSON-LD 节点：使用 `@type` 等别名，未知字段原样保留并回显。"""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_jsonld(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class PropertyValueDTO(JsonLdDTO):
    """Schema.org PropertyValue（凭据等键值对）"""
    type: str = Field("PropertyValue", alias="@type")
    name: Optional[str] = None
    value: Optional[Any] = None


class TargetDescriptorDTO(JsonLdDTO):
    """目标存储桶描述：桶名、端点以及 additionalProperty 中的凭据"""
    type: str = Field("DataCatalog", alias="@type")
    identifier: Optional[str] = None
    name: Optional[str] = None
    url: Optional[str] = None
    additional_property: list[PropertyValueDTO] = Field(
        default_factory=list, alias="additionalProperty"
    )


class ObjectDescriptorDTO(JsonLdDTO):
    """对象描述：S3 key、本地路径、格式、大小"""
    type: str = Field("MediaObject", alias="@type")
    identifier: Optional[str] = None
    name: Optional[str] = None
    content_url: Optional[str] = Field(None, alias="contentUrl")
    encoding_format: Optional[str] = Field(None, alias="encodingFormat")
    content_size: Optional[int] = Field(None, alias="contentSize")
    upload_date: Optional[str] = Field(None, alias="uploadDate")


class SemanticActionDTO(JsonLdDTO):
    """语义动作信封（公共字段）"""
    kind: ClassVar[ActionKind]

    context: Optional[Any] = Field("https://schema.org", alias="@context")
    type: str = Field(..., alias="@type")
    identifier: Optional[str] = None
    name: Optional[str] = None
    object: Optional[ObjectDescriptorDTO] = None
    target: Optional[TargetDescriptorDTO] = None
    target_url: Optional[str] = Field(None, alias="targetUrl")
    query: Optional[Any] = None


class UploadActionDTO(SemanticActionDTO):
    kind: ClassVar[ActionKind] = ActionKind.UPLOAD
    type: Literal["CreateAction"] = Field("CreateAction", alias="@type")


class DownloadActionDTO(SemanticActionDTO):
    kind: ClassVar[ActionKind] = ActionKind.DOWNLOAD
    type: Literal["DownloadAction"] = Field("DownloadAction", alias="@type")


class DeleteActionDTO(SemanticActionDTO):
    kind: ClassVar[ActionKind] = ActionKind.DELETE
    type: Literal["DeleteAction"] = Field("DeleteAction", alias="@type")


class ListActionDTO(SemanticActionDTO):
    kind: ClassVar[ActionKind] = ActionKind.LIST
    type: Literal["SearchAction"] = Field("SearchAction", alias="@type")


# @type 判别值 -> 具体动作模型（与 ActionKind 一一对应）
ACTION_MODELS: dict[ActionKind, type[SemanticActionDTO]] = {
    ActionKind.UPLOAD: UploadActionDTO,
    ActionKind.DOWNLOAD: DownloadActionDTO,
    ActionKind.DELETE: DeleteActionDTO,
    ActionKind.LIST: ListActionDTO,
}


class UploadObjectRequestDTO(DTOBase):
    """REST 上传请求：content 为 base64 编码内容"""
    key: Optional[str] = Field(None, description="目标对象 key")
    content: Optional[str] = Field(None, description="base64 编码的文件内容")
    bucket: Optional[str] = Field(None, description="覆盖默认存储桶")
    encoding_format: Optional[str] = Field(None, alias="encodingFormat", description="MIME 类型")

    model_config = ConfigDict(populate_by_name=True)


class CreateBucketRequestDTO(DTOBase):
    """REST 创建存储桶请求"""
    name: Optional[str] = Field(None, description="存储桶名称")


class OperationRecordDTO(DTOBase):
    """操作状态记录"""
    operation_id: str
    action_type: str
    status: str
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    error: Optional[str] = None
