"""
Utility modules organized by domain.

Submodules:
- logging: Logging configuration
- ui: Output coordination, bar rendering and refresh management
"""
