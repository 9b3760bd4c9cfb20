import pytest

from application.dto import TargetDescriptorDTO
from application.services.credential_resolver import resolve_credentials
from domain.action import MissingCredentials


def target(props=None, **fields):
    data = {"@type": "DataCatalog", **fields}
    data["additionalProperty"] = [
        {"@type": "PropertyValue", "name": k, "value": v} for k, v in (props or {}).items()
    ]
    return TargetDescriptorDTO.model_validate(data)


def test_reads_all_fields_from_properties():
    creds = resolve_credentials(target({
        "url": "https://fsn1.your-objectstorage.com",
        "region": "fsn1",
        "accessKey": "AK",
        "secretKey": "SK",
        "bucket": "media",
    }))
    assert creds.endpoint_url == "https://fsn1.your-objectstorage.com"
    assert creds.region == "fsn1"
    assert creds.access_key == "AK"
    assert creds.secret_key == "SK"
    assert creds.bucket == "media"


def test_accepts_common_aliases_case_insensitively():
    creds = resolve_credentials(target({
        "Endpoint": "http://minio:9000",
        "aws_access_key_id": "AK",
        "SecretAccessKey": "SK",
        "bucketName": "b",
    }))
    assert (creds.endpoint_url, creds.access_key, creds.secret_key, creds.bucket) == (
        "http://minio:9000", "AK", "SK", "b",
    )


def test_descriptor_fields_are_fallbacks():
    creds = resolve_credentials(
        target({"accessKey": "AK", "secretKey": "SK"}, url="http://s3.local", identifier="from-id"),
    )
    assert creds.endpoint_url == "http://s3.local"
    assert creds.bucket == "from-id"

    creds = resolve_credentials(target({"accessKey": "AK", "secretKey": "SK", "url": "http://x"}, name="from-name"))
    assert creds.bucket == "from-name"


def test_property_wins_over_descriptor():
    creds = resolve_credentials(
        target({"url": "http://prop", "accessKey": "AK", "secretKey": "SK", "bucket": "prop-bucket"},
               url="http://descriptor", identifier="descriptor-bucket"),
    )
    assert creds.endpoint_url == "http://prop"
    assert creds.bucket == "prop-bucket"


def test_region_defaults():
    creds = resolve_credentials(
        target({"url": "http://x", "accessKey": "AK", "secretKey": "SK", "bucket": "b"}),
        default_region="eu-west-1",
    )
    assert creds.region == "eu-west-1"


def test_missing_fields_are_listed_in_order():
    with pytest.raises(MissingCredentials) as exc_info:
        resolve_credentials(target({"accessKey": "AK", "secretKey": "  "}))
    assert exc_info.value.missing == ["url", "secretKey", "bucket"]
    assert str(exc_info.value) == "Failed to extract S3 credentials: missing url, secretKey, bucket"


def test_bucket_optional_when_not_required():
    creds = resolve_credentials(
        target({"url": "http://x", "accessKey": "AK", "secretKey": "SK"}),
        require_bucket=False,
    )
    assert creds.bucket is None


def test_no_target():
    with pytest.raises(MissingCredentials) as exc_info:
        resolve_credentials(None, require_bucket=False)
    assert exc_info.value.missing == ["url", "accessKey", "secretKey"]


def test_secret_is_not_in_repr():
    creds = resolve_credentials(target({"url": "http://x", "accessKey": "AKIA1234", "secretKey": "topsecret", "bucket": "b"}))
    assert "topsecret" not in repr(creds)
