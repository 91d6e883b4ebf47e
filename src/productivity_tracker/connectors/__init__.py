"""
Connectors.

Components:
- console_connector.py: interactive REPL on top of the slash-command registry
- matrix_client.py: send-only Matrix client used for reminders
"""
