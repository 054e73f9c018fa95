"""
Core module for shared domain infrastructure.

This module contains:
- Domain exceptions, outcomes, value objects and events
- Licensing configuration
- Event bus, audit log and database helpers
- Metrics and background tasks
"""
