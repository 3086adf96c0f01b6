"""
DynamoDB stores for upload records and the identity index.
"""
from typing import Any, Dict

from boto3.dynamodb.types import TypeDeserializer

from celebindex.core.exceptions import IdentityIndexError, MetadataStoreError
from celebindex.core.logging import get_logger
from celebindex.domain.entities.identity import IdentityRecord, UploadRecord
from celebindex.domain.interfaces.storage.identity_index import IdentityIndex
from celebindex.domain.interfaces.storage.upload_records import UploadRecordStore
from celebindex.services.aws.errors import AWS_ERRORS, log_aws_error

logger = get_logger(__name__)

# Attribute names used by existing tables.
KEY_ATTRIBUTE = "ID"
NAME_ATTRIBUTE = "celeb_name"
IMAGES_ATTRIBUTE = "celeb_images"

MERGE_EXPRESSION = (
    f"SET {IMAGES_ATTRIBUTE} = list_append(if_not_exists({IMAGES_ATTRIBUTE}, :empty_list), :celeb_images), "
    f"{NAME_ATTRIBUTE} = if_not_exists({NAME_ATTRIBUTE}, :celeb_name)"
)

_deserializer = TypeDeserializer()


def _deserialize(item: Dict[str, Any]) -> Dict[str, Any]:
    return {name: _deserializer.deserialize(value) for name, value in item.items()}


class DynamoDBUploadRecordStore(UploadRecordStore):
    """Upload metadata table, one item per upload keyed by ``ID``."""

    def __init__(self, client: Any, table_name: str) -> None:
        self._client = client
        self.table_name = table_name

    async def save(self, record: UploadRecord) -> None:
        """Put the upload record.

        Raises:
            MetadataStoreError: If DynamoDB rejects the write
        """
        try:
            await self._client.put_item(
                TableName=self.table_name,
                Item={
                    KEY_ATTRIBUTE: {"S": record.id},
                    "fileName": {"S": record.file_name},
                    "url": {"S": record.url},
                },
            )
        except AWS_ERRORS as e:
            code = log_aws_error(logger, "Failed to write upload record", e,
                                 upload_id=record.id, table=self.table_name)
            raise MetadataStoreError(
                f"Failed to write upload record '{record.id}': {e}",
                details={"upload_id": record.id, "error_code": code},
            ) from e

        logger.info("Wrote upload record", upload_id=record.id, table=self.table_name)


class DynamoDBIdentityIndex(IdentityIndex):
    """Identity index table keyed by the recognition service's identity id.

    The merge is a single conditional ``update_item``: DynamoDB evaluates
    ``if_not_exists`` and ``list_append`` atomically on the item, so
    concurrent merges on the same identity never overwrite each other.
    """

    def __init__(self, client: Any, table_name: str) -> None:
        self._client = client
        self.table_name = table_name

    async def merge(
        self,
        identity_id: str,
        display_name: str,
        image_url: str,
    ) -> IdentityRecord:
        """Append ``image_url`` to the identity, creating it if needed.

        Raises:
            IdentityIndexError: If the update fails
        """
        try:
            response = await self._client.update_item(
                TableName=self.table_name,
                Key={KEY_ATTRIBUTE: {"S": identity_id}},
                UpdateExpression=MERGE_EXPRESSION,
                ExpressionAttributeValues={
                    ":celeb_name": {"S": display_name},
                    ":celeb_images": {"L": [{"S": image_url}]},
                    ":empty_list": {"L": []},
                },
                ReturnValues="ALL_NEW",
            )
        except AWS_ERRORS as e:
            code = log_aws_error(logger, "Failed to merge identity record", e,
                                 identity_id=identity_id, table=self.table_name)
            raise IdentityIndexError(
                f"Failed to merge identity '{identity_id}': {e}",
                details={"identity_id": identity_id, "error_code": code},
            ) from e

        attributes = _deserialize(response.get("Attributes", {}))
        return IdentityRecord(
            identity_id=attributes.get(KEY_ATTRIBUTE, identity_id),
            display_name=attributes.get(NAME_ATTRIBUTE),
            image_urls=list(attributes.get(IMAGES_ATTRIBUTE, [])),
        )
