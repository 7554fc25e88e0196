"""disktrend: per-volume free-space history, trend and time-to-full forecast."""
