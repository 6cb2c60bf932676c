#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify MongoDB is reachable and the indexes can be built.
Usage: python scripts/check_connection.py
"""
import sys
sys.path.insert(0, '.')

from jobboard.db.mongodb import test_mongo_connection, init_mongo_indexes
from jobboard.core.config import get_settings


def main():
    settings = get_settings()
    print("=" * 50)
    print("JOB BOARD - CONNECTION CHECK")
    print("=" * 50)

    print("\n[1] Testing MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    if not test_mongo_connection():
        print("    MongoDB: FAILED")
        sys.exit(1)
    print("    MongoDB: CONNECTED")

    print("\n[2] Creating indexes...")
    init_mongo_indexes()
    print("    Indexes: OK (users.email, applicants userId+jobId unique)")

    print("\n[3] Upload directory...")
    print(f"    {settings.upload_dir} (max {settings.max_resume_size_mb}MB per resume)")

    print("\n" + "=" * 50)
    print("Connection check complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
