"""
Background tasks bound to the bot's lifetime.

- **cooldown_sweep_scheduler.py**: Periodically forgets cooldown slots older
  than the retention horizon so the tracker stays bounded.

- **status_scheduler.py**: Rotates the bot's presence to a random quote every
  few minutes.

Both schedulers expose ``start``/``shutdown`` so tests and the runtime can
control them deterministically.
"""
