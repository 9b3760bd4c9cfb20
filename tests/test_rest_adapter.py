import pytest

from application.services.rest_adapter import RestActionAdapter, decode_content
from core.config import StorageSettings
from domain.common.exceptions import InvalidParameterException


def props(target):
    return {p["name"]: p["value"] for p in target["additionalProperty"]}


def test_target_from_storage_settings(dispatcher):
    storage = StorageSettings(
        endpoint="https://fsn1.your-objectstorage.com",
        region="fsn1",
        access_key_id="AK",
        secret_access_key="SK",
        bucket="default",
    )
    adapter = RestActionAdapter(dispatcher, storage)

    target = adapter.build_target()
    assert target["identifier"] == "default"
    assert props(target) == {
        "url": "https://fsn1.your-objectstorage.com",
        "region": "fsn1",
        "accessKey": "AK",
        "secretKey": "SK",
        "bucket": "default",
    }
    assert props(adapter.build_target("override"))["bucket"] == "override"


def test_unset_settings_are_left_out(dispatcher):
    adapter = RestActionAdapter(dispatcher, StorageSettings())
    target = adapter.build_target()
    assert target["additionalProperty"] == []
    assert "identifier" not in target


def test_decode_content():
    assert decode_content("aGVsbG8=") == b"hello"
    with pytest.raises(InvalidParameterException):
        decode_content("###")
