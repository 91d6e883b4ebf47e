"""
Command-line application.

Components:
- bootstrap.py: composition root (settings -> AppState)
- commands.py: slash-command registry and handlers
- main.py: entry point (logging, scanner thread, console loop)
"""
