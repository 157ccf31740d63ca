"""
Schemas module - Request/Response schemas for API endpoints and AI flows.

Everything lives in weinds.schemas.schemas:
- Request schemas (what the API accepts)
- Response schemas (what the API returns)
- AI flow input/output contracts (what the LLM must produce)
"""
