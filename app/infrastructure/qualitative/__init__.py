"""
Infrastructure adapters for the qualitative screening bounded context.

Each adapter implements a domain port (ABC) and connects
to external systems: the override database, the screening
endpoint and the SEC EDGAR archive.
"""
