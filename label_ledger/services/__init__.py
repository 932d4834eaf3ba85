"""Services module.

This module provides the service layer architecture:
- exceptions: Custom service exceptions
- labels: Code formatting, sequence store, batch ledger and label allocation
- settings_service: Typed label settings stored as key/value rows
- backup_service: Point-in-time copies of the SQLite database
"""
