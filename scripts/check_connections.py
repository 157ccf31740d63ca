#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify MongoDB and the LLM endpoint are reachable.
Usage: python scripts/check_connections.py
"""

from weinds.db.mongodb import test_mongo_connection
from weinds.services.llm_client import get_llm_client
from weinds.core.config import get_settings


def main():
    settings = get_settings()
    print("=" * 50)
    print("WEINDS - CONNECTION CHECK")
    print("=" * 50)

    print("\n[1] Checking MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    if test_mongo_connection():
        print("    MongoDB: CONNECTED")
    else:
        print("    MongoDB: FAILED")

    # Only if API key is set
    print("\n[2] Checking LLM API...")
    if settings.llm_configured:
        print(f"    Base URL: {settings.llm_base_url}")
        print(f"    Model: {settings.llm_model}")
        if get_llm_client().test_connection():
            print("    LLM: CONNECTED")
        else:
            print("    LLM: FAILED")
    else:
        print("    LLM: API key not configured (AI features will fail)")

    print("\n" + "=" * 50)
    print("Connection check complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
