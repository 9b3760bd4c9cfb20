from api.middleware.logging import MASK, LoggingMiddleware


def test_credentials_in_property_values_are_masked():
    body = {
        "@type": "CreateAction",
        "object": {"identifier": "k", "contentUrl": "/tmp/f"},
        "target": {
            "additionalProperty": [
                {"@type": "PropertyValue", "name": "url", "value": "http://s3"},
                {"@type": "PropertyValue", "name": "accessKey", "value": "AKIA"},
                {"@type": "PropertyValue", "name": "secretKey", "value": "shh"},
            ]
        },
    }
    cleaned = LoggingMiddleware.sanitize(body)
    values = {p["name"]: p["value"] for p in cleaned["target"]["additionalProperty"]}
    assert values == {"url": "http://s3", "accessKey": MASK, "secretKey": MASK}
    assert cleaned["object"] == {"identifier": "k", "contentUrl": "/tmp/f"}


def test_rest_upload_content_is_masked():
    cleaned = LoggingMiddleware.sanitize({"key": "a.txt", "content": "aGVsbG8=", "api_key": "x"})
    assert cleaned == {"key": "a.txt", "content": MASK, "api_key": MASK}
