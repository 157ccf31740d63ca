"""
Weinds - AI-powered career platform backend.

Architecture:
- MongoDB: every record (users, profiles, posts, applications, tests, interviews)
- OpenAI-compatible LLM: templated flows with schema-validated JSON output
- Local object storage: uploaded skill-test files
"""

__version__ = "1.0.0"
