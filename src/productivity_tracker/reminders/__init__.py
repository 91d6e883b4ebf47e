"""
Reminder subsystem.

Components:
- overdue_scanner.py: periodic sweep that reminds owners about overdue tasks
- sinks.py: NotificationSink implementations (log, SMTP, Matrix)
"""
