"""
Database module - Generic async MongoDB connection using Beanie ODM.

Provides reusable MongoDB connectivity for any project.

Usage:
    from common.database import MongoDB

    db = MongoDB()
    await db.connect(uri, database_name)
    collection = db.get_collection("Users")
"""

from common.database.mongodb import MongoDB, mask_uri

__all__ = ["MongoDB", "mask_uri"]
