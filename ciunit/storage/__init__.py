# ==============================================
# STORAGE (MySQL + MongoDB)
# ==============================================
#
# This package wraps the external stores that fixtures are
# written to.
#
# Modules:
# --------
# - mysql_client.py    → MySQL connection, row inserts, table clears
# - mongo_client.py    → MongoDB connection and collections
# - document.py        → Document handles addressed by (ref, type)
#
# ==============================================

from .mysql_client import MySQLClient
from .mongo_client import MongoClient
from .document import DocumentStore, MongoDoc, StoreResponse

__all__ = [
    "MySQLClient",
    "MongoClient",
    "DocumentStore",
    "MongoDoc",
    "StoreResponse"
]
