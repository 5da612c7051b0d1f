"""Taskboard: bearer-token accounts and per-user task management over HTTP."""
