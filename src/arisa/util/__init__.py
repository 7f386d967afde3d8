"""
Utility functions and helpers for Arisa.

- **logger.py**: Centralized logging configuration with colored console output,
  per-session log files, and suppression of noisy library loggers. Uses
  prompt_toolkit so console output never tears interactive prompts.

- **quotes.py**: Random quote, status and activity pickers used for embed
  footers and the rotating bot presence.
"""
