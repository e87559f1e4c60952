"""Core model: settings, prompt compiler, sources, results, and screen flow.

RULES:
- Nothing in this package imports tkinter
- The controller depends on the service only through transcribe()
"""
