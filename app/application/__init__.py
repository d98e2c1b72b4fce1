"""
Application layer package.

Use cases that orchestrate domain logic, one class per operation with a
single ``execute`` method. Depends on domain ports, never on infrastructure.
"""
