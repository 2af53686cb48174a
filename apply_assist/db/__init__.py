"""
Database module - MongoDB connection.
"""
from apply_assist.db.mongodb import get_mongo_db, get_jobs_collection, test_mongo_connection

__all__ = [
    "get_mongo_db",
    "get_jobs_collection",
    "test_mongo_connection"
]
