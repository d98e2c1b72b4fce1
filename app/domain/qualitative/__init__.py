"""
Qualitative screening bounded context: domain layer.

This module contains all domain logic for the qualitative review workflow:
- Locked-ticker registry and lock-state resolution
- Per-ticker segment hints for annual filing tables
- Revenue segment extraction from filing HTML
- Qualitative override entities
"""
