"""
Domain layer package.

Pure business logic for the qualitative screening context: entities,
static registries, extraction services and port interfaces.
No framework imports, no IO, no side effects.
"""
