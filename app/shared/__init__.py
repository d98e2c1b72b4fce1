"""
Shared module package.

Contains cross-cutting concerns used across bounded contexts:
- Error handling and mapping
- Security middleware, admin sessions and rate limiting
- Logging configuration
- Time-bounded caching
"""
