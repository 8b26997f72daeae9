"""In-memory S3 double for store and endpoint tests.

Only head_object, get_object and put_object are implemented. Missing
keys and failed preconditions raise real botocore ``ClientError``s
with the codes S3 uses.
"""

from __future__ import annotations

import hashlib
import io
from dataclasses import dataclass, field
from typing import Any, Callable

from botocore.exceptions import ClientError

BUCKET = "notes"
KEY = "todo.md"


@dataclass
class FakeObject:
    content: bytes
    metadata: dict[str, str] = field(default_factory=dict)
    content_type: str = "text/plain"

    @property
    def etag(self) -> str:
        return f'"{hashlib.md5(self.content).hexdigest()}"'


class FakeS3Client:
    """Dictionary-backed stand-in for a boto3 S3 client."""

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], FakeObject] = {}
        self.calls: list[str] = []
        self.put_requests: list[dict[str, Any]] = []
        self.opened_bodies: list[io.BytesIO] = []
        self.failure: Exception | None = None
        self.before_put: Callable[[], None] | None = None

    def add_object(
        self,
        content: bytes,
        version: str | None = None,
        bucket: str = BUCKET,
        key: str = KEY,
    ) -> None:
        metadata = {} if version is None else {"version": version}
        self.objects[(bucket, key)] = FakeObject(content=content, metadata=metadata)

    def stored(self, bucket: str = BUCKET, key: str = KEY) -> FakeObject:
        return self.objects[(bucket, key)]

    def head_object(self, Bucket: str, Key: str) -> dict[str, Any]:
        self._record("head_object")
        obj = self.objects.get((Bucket, Key))
        if obj is None:
            raise _client_error("404", "Not Found", "HeadObject")
        return {
            "ContentLength": len(obj.content),
            "ContentType": obj.content_type,
            "ETag": obj.etag,
            "Metadata": dict(obj.metadata),
        }

    def get_object(self, Bucket: str, Key: str) -> dict[str, Any]:
        self._record("get_object")
        obj = self.objects.get((Bucket, Key))
        if obj is None:
            raise _client_error("NoSuchKey", "The specified key does not exist.", "GetObject")
        body = io.BytesIO(obj.content)
        self.opened_bodies.append(body)
        return {
            "Body": body,
            "ContentLength": len(obj.content),
            "ContentType": obj.content_type,
            "ETag": obj.etag,
            "Metadata": dict(obj.metadata),
        }

    def put_object(
        self,
        Bucket: str,
        Key: str,
        Body: Any,
        ContentLength: int,
        ContentType: str,
        Metadata: dict[str, str],
        IfMatch: str | None = None,
        IfNoneMatch: str | None = None,
    ) -> dict[str, Any]:
        self._record("put_object")
        if self.before_put is not None:
            hook, self.before_put = self.before_put, None
            hook()
        data = Body if isinstance(Body, bytes) else Body.read()
        self.put_requests.append(
            {
                "ContentLength": ContentLength,
                "ContentType": ContentType,
                "Metadata": dict(Metadata),
                "IfMatch": IfMatch,
                "IfNoneMatch": IfNoneMatch,
            }
        )
        current = self.objects.get((Bucket, Key))
        if IfNoneMatch == "*" and current is not None:
            raise _client_error("PreconditionFailed", "At least one precondition failed", "PutObject")
        if IfMatch is not None and (current is None or current.etag != IfMatch):
            raise _client_error("PreconditionFailed", "At least one precondition failed", "PutObject")
        obj = FakeObject(content=data, metadata=dict(Metadata), content_type=ContentType)
        self.objects[(Bucket, Key)] = obj
        return {"ETag": obj.etag}

    def _record(self, operation: str) -> None:
        self.calls.append(operation)
        if self.failure is not None:
            raise self.failure


def _client_error(code: str, message: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)
