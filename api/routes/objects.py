"""
REST 便捷路由：对象与存储桶操作，内部转换为语义动作
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_rest_adapter, require_api_key
from application.dto import CreateBucketRequestDTO, UploadObjectRequestDTO
from application.services.rest_adapter import RestActionAdapter

router = APIRouter(
    tags=["REST"],
    dependencies=[Depends(require_api_key)],
)


@router.post("/objects", summary="上传对象（转换为 CreateAction）")
async def upload_object(
    payload: UploadObjectRequestDTO,
    adapter: RestActionAdapter = Depends(get_rest_adapter),
):
    """
    - **key**: 对象 key
    - **content**: base64 编码的文件内容
    - **bucket**: 可选，覆盖默认存储桶
    """
    return await adapter.upload_object(
        payload.key,
        payload.content,
        bucket=payload.bucket,
        encoding_format=payload.encoding_format,
    )


@router.get("/objects/{key:path}", summary="查询对象（转换为 SearchAction）")
async def get_object(
    key: str,
    bucket: Optional[str] = Query(None, description="覆盖默认存储桶"),
    adapter: RestActionAdapter = Depends(get_rest_adapter),
):
    return await adapter.get_object(key, bucket=bucket)


@router.delete("/objects/{key:path}", summary="删除对象（转换为 DeleteAction）")
async def delete_object(
    key: str,
    bucket: Optional[str] = Query(None, description="覆盖默认存储桶"),
    adapter: RestActionAdapter = Depends(get_rest_adapter),
):
    return await adapter.delete_object(key, bucket=bucket)


@router.get("/buckets", summary="列出存储桶（转换为 SearchAction）")
async def list_buckets(adapter: RestActionAdapter = Depends(get_rest_adapter)):
    return await adapter.list_buckets()


@router.post("/buckets", summary="创建存储桶（不支持，返回 FailedActionStatus）")
async def create_bucket(
    payload: CreateBucketRequestDTO,
    adapter: RestActionAdapter = Depends(get_rest_adapter),
):
    return await adapter.create_bucket(payload.name)
