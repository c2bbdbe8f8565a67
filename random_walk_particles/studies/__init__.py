"""
Studies: watch the system before tuning it.

- observe: run a preset headless or animated and summarize what happened
"""
