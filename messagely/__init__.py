"""Messagely: user directory and message listing backend."""
