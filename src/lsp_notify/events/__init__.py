"""Inbound protocol events: handlers and subscriber lists."""
