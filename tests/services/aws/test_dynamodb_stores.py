"""Tests for the DynamoDB upload record store and identity index."""
import pytest
from botocore.exceptions import ClientError

from celebindex.core.exceptions import IdentityIndexError, MetadataStoreError
from celebindex.domain.entities.identity import UploadRecord
from celebindex.services.aws.dynamodb import (
    MERGE_EXPRESSION,
    DynamoDBIdentityIndex,
    DynamoDBUploadRecordStore,
)


def client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class StubDynamoDBClient:
    """Records calls and answers with canned responses."""

    def __init__(self, response=None, error=None):
        self.response = response or {}
        self.error = error
        self.calls = []

    async def put_item(self, **kwargs):
        self.calls.append(("put_item", kwargs))
        if self.error:
            raise self.error
        return {}

    async def update_item(self, **kwargs):
        self.calls.append(("update_item", kwargs))
        if self.error:
            raise self.error
        return self.response


class TestUploadRecordStore:

    async def test_put_item_attributes(self):
        client = StubDynamoDBClient()
        store = DynamoDBUploadRecordStore(client, "uploads")
        record = UploadRecord(id="u1", file_name="a.jpg", url="http://b/u1.jpg", extension="jpg")

        await store.save(record)

        name, kwargs = client.calls[0]
        assert name == "put_item"
        assert kwargs["TableName"] == "uploads"
        assert kwargs["Item"] == {
            "ID": {"S": "u1"},
            "fileName": {"S": "a.jpg"},
            "url": {"S": "http://b/u1.jpg"},
        }

    async def test_client_error_becomes_metadata_error(self):
        client = StubDynamoDBClient(error=client_error("ResourceNotFoundException", "PutItem"))
        store = DynamoDBUploadRecordStore(client, "uploads")
        record = UploadRecord(id="u1", file_name="a.jpg", url="http://b/u1.jpg", extension="jpg")

        with pytest.raises(MetadataStoreError) as exc_info:
            await store.save(record)
        assert exc_info.value.details["error_code"] == "ResourceNotFoundException"


class TestIdentityIndex:

    async def test_merge_is_single_conditional_update(self):
        client = StubDynamoDBClient(response={
            "Attributes": {
                "ID": {"S": "C1"},
                "celeb_name": {"S": "Jane"},
                "celeb_images": {"L": [{"S": "http://b/old.jpg"}, {"S": "http://b/new.jpg"}]},
            }
        })
        index = DynamoDBIdentityIndex(client, "celebs")

        record = await index.merge("C1", "Jane", "http://b/new.jpg")

        assert len(client.calls) == 1
        name, kwargs = client.calls[0]
        assert name == "update_item"
        assert kwargs["TableName"] == "celebs"
        assert kwargs["Key"] == {"ID": {"S": "C1"}}
        assert kwargs["UpdateExpression"] == MERGE_EXPRESSION
        assert kwargs["ExpressionAttributeValues"] == {
            ":celeb_name": {"S": "Jane"},
            ":celeb_images": {"L": [{"S": "http://b/new.jpg"}]},
            ":empty_list": {"L": []},
        }
        assert kwargs["ReturnValues"] == "ALL_NEW"

        assert record.identity_id == "C1"
        assert record.display_name == "Jane"
        assert record.image_urls == ["http://b/old.jpg", "http://b/new.jpg"]

    def test_expression_appends_and_keeps_first_name(self):
        assert "list_append(if_not_exists(celeb_images, :empty_list), :celeb_images)" in MERGE_EXPRESSION
        assert "celeb_name = if_not_exists(celeb_name, :celeb_name)" in MERGE_EXPRESSION

    async def test_client_error_becomes_index_error(self):
        client = StubDynamoDBClient(
            error=client_error("ProvisionedThroughputExceededException", "UpdateItem"))
        index = DynamoDBIdentityIndex(client, "celebs")

        with pytest.raises(IdentityIndexError) as exc_info:
            await index.merge("C1", "Jane", "http://b/new.jpg")
        assert exc_info.value.details["error_code"] == "ProvisionedThroughputExceededException"
        assert isinstance(exc_info.value.__cause__, ClientError)
