"""
Interfaces layer package.

FastAPI routers (health, admin session, qualitative screening) and their
Pydantic schemas. Routes call use cases and return responses; no business
logic belongs here.
"""
