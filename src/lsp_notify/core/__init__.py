"""Notification aggregation core: models, registry, removal, display, readiness."""
