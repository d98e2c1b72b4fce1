"""
Infrastructure layer package.

Contains concrete implementations (adapters) of the ports
defined in the domain layer. This is where the override store,
the SEC EDGAR client and the screening API client live.
"""
