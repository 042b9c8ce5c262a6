from __future__ import annotations


from typing import Any, Optional

from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

DATE_INDEX = "by_date"
# NUL 排序低于任何字符；标题中的控制字符在解码时已替换，保证 title_date 的排序等价于 title 排序
TITLE_DATE_SEP = "\x00"


def title_date_key(title: str, date: str) -> str:
    return f"{title}{TITLE_DATE_SEP}{date}"


def _error_code(err: ClientError) -> str:
    return err.response.get("Error", {}).get("Code", "")


def table_exists(ddb, table_name: str) -> bool:
    try:
        ddb.meta.client.describe_table(TableName=table_name)
        return True
    except ClientError as e:
        if _error_code(e) == "ResourceNotFoundException":
            return False
        raise


def ensure_schema(ddb, table_name: str, read_capacity: int = 5, write_capacity: int = 5) -> bool:
    """Create the events table unless it exists. Returns True when created here."""
    if table_exists(ddb, table_name):
        return False
    try:
        table = ddb.create_table(
            TableName=table_name,
            AttributeDefinitions=[
                {"AttributeName": "id", "AttributeType": "S"},
                {"AttributeName": "title_date", "AttributeType": "S"},
                {"AttributeName": "date", "AttributeType": "S"},
            ],
            KeySchema=[
                {"AttributeName": "id", "KeyType": "HASH"},
                {"AttributeName": "title_date", "KeyType": "RANGE"},
            ],
            LocalSecondaryIndexes=[
                {
                    "IndexName": DATE_INDEX,
                    "KeySchema": [
                        {"AttributeName": "id", "KeyType": "HASH"},
                        {"AttributeName": "date", "KeyType": "RANGE"},
                    ],
                    "Projection": {"ProjectionType": "ALL"},
                }
            ],
            ProvisionedThroughput={
                "ReadCapacityUnits": read_capacity,
                "WriteCapacityUnits": write_capacity,
            },
        )
    except ClientError as e:
        # another process won the race
        if _error_code(e) == "ResourceInUseException":
            return False
        raise
    table.wait_until_exists()
    return True


def put(table, id: str, title: str, date: str):
    table.put_item(
        Item={
            "id": id,
            "title": title,
            "date": date,
            "title_date": title_date_key(title, date),
        }
    )


def query_by_group(table, group_id: str, index_name: Optional[str] = None) -> list[dict[str, Any]]:
    kwargs: dict[str, Any] = {
        "KeyConditionExpression": Key("id").eq(group_id),
        "ScanIndexForward": True,
    }
    if index_name:
        kwargs["IndexName"] = index_name
    items: list[dict[str, Any]] = []
    while True:
        resp = table.query(**kwargs)
        items.extend(resp.get("Items", []))
        last = resp.get("LastEvaluatedKey")
        if not last:
            return items
        kwargs["ExclusiveStartKey"] = last
