"""
Core layer.

Components:
- errors.py: error taxonomy shared by stores, API facade and scanner
- ports.py: Protocols the rest of the app depends on
- state.py: AppState container wired by the composition root
"""
