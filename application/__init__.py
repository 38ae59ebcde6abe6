"""
Application Layer for the workout migration engine.

This package contains:
- ports/: Abstract interfaces the use cases need from their host
- use_cases/: Batch migration, bulk rollback, analysis and reporting
"""
