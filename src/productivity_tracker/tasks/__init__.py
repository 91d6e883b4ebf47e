"""
Task subsystem.

Components:
- task_models.py: Task record, priority levels, date/timestamp helpers
- task_store.py: owner-scoped SQLite storage + aggregation/scanner queries
- task_api.py: transport-neutral request handlers (status + JSON body)
"""
