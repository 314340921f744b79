# ==============================================
# Document Handles
# ==============================================
#
# PURPOSE:
#   A document fixture is addressed by (ref, doc_type): ref is the
#   document _id, doc_type a tag such as PROJECT or BOM-ITEM-QTY
#   that also picks the collection. These classes wrap one such
#   document so the fixture manager never touches pymongo directly.
#
# CLASSES:
# --------
# - StoreResponse (dataclass)
#     message: str    → "OK" on success, store error text otherwise
#     ok: bool        → message == "OK"
#
# - MongoDoc
#     Handle for one document. Store errors are reported through
#     the StoreResponse passed to save()/delete(), never raised.
#
#     - exists() -> bool
#     - load() -> dict | None
#     - set_doc(content: dict) -> None     (forces _id = ref)
#     - save(response) -> StoreResponse    (insert)
#     - delete(response) -> StoreResponse
#
# - DocumentStore
#     - document(ref, doc_type) -> MongoDoc
#     - collection_for(doc_type) -> str
#         "BOM-ITEM-QTY" -> "bom_item_qty"
#
# ==============================================

import re
from dataclasses import dataclass
from typing import Any, Optional

from pymongo.errors import PyMongoError

OK = "OK"


@dataclass
class StoreResponse:
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.message == OK


class MongoDoc:
    def __init__(self, collection, ref: Any, doc_type: str):
        self.collection = collection
        self.ref = ref
        self.doc_type = doc_type
        self.content: Optional[dict] = None

    def exists(self) -> bool:
        return self.collection.count_documents({"_id": self.ref}, limit=1) > 0

    def load(self) -> Optional[dict]:
        return self.collection.find_one({"_id": self.ref})

    def set_doc(self, content: dict) -> None:
        if not isinstance(content, dict):
            raise TypeError(f"Document content must be a JSON object, got {type(content).__name__}")
        document = dict(content)
        document["_id"] = self.ref
        self.content = document

    def save(self, response: StoreResponse) -> StoreResponse:
        if self.content is None:
            response.message = f"No content set for document [{self.ref}]"
            return response
        try:
            self.collection.insert_one(self.content)
        except PyMongoError as e:
            response.message = str(e)
        else:
            response.message = OK
        return response

    def delete(self, response: StoreResponse) -> StoreResponse:
        try:
            result = self.collection.delete_one({"_id": self.ref})
        except PyMongoError as e:
            response.message = str(e)
            return response
        if result.deleted_count:
            response.message = OK
        else:
            response.message = f"Document [{self.ref}] not found"
        return response

    def __repr__(self):
        return f"MongoDoc(ref={self.ref!r}, doc_type={self.doc_type!r})"


class DocumentStore:
    def __init__(self, mongo_client):
        self.mongo_client = mongo_client

    @staticmethod
    def collection_for(doc_type: str) -> str:
        name = re.sub(r"[\s\-]+", "_", doc_type.strip()).lower()
        if not name:
            raise ValueError("Document type tag must not be empty")
        return name

    def document(self, ref: Any, doc_type: str) -> MongoDoc:
        collection = self.mongo_client.collection(self.collection_for(doc_type))
        return MongoDoc(collection, ref, doc_type)
