# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets; keep the Matrix password in .env (gitignored).

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "LSP_NOTIFY_LOG_LEVEL": "Console logging level (default: WARNING). The log file always gets DEBUG.",
    "LSP_NOTIFY_DATA_DIR": "Local data directory for logs and the Matrix session (default: .local/lsp-notify).",
    # Display
    "LSP_NOTIFY_SURFACE": "Where notifications go: console, terminal or matrix (default: terminal).",
    "LSP_NOTIFY_REPLACE_MODE": "auto (probe the surface), always or never (default: auto).",
    "LSP_NOTIFY_TITLE": "Notification title (default: LSP).",
    "LSP_NOTIFY_WINDOW_WIDTH": "Width used to estimate wrapped lines for the height hint (default: 60).",
    # Icons
    "LSP_NOTIFY_ICONS": "Master switch for all icons (true/false, default: true).",
    "LSP_NOTIFY_SPINNER": "Animate a spinner while the notification is open (true/false).",
    "LSP_NOTIFY_DONE_ICON": "Show a check mark on the final render (true/false).",
    # Backends
    "LSP_NOTIFY_EXCLUDES": "Comma/space separated backend names whose events are ignored.",
    # Timing (seconds)
    "LSP_NOTIFY_TASK_TIMEOUT": "Delay before a finished task is removed (default: 2.0).",
    "LSP_NOTIFY_CLIENT_TIMEOUT": "Delay before a backend with no tasks is removed (default: 1.0).",
    "LSP_NOTIFY_DONE_TIMEOUT": "How long the final render stays visible (default: 1.0).",
    "LSP_NOTIFY_SPINNER_INTERVAL": "Spinner frame interval (default: 0.1, minimum 0.02).",
    # Matrix surface
    "LSP_NOTIFY_MATRIX_HOMESERVER": "Matrix homeserver URL.",
    "LSP_NOTIFY_MATRIX_USER_ID": "Matrix user ID (bot).",
    "LSP_NOTIFY_MATRIX_PASSWORD": "Password for first login (session stored locally).",
    "LSP_NOTIFY_MATRIX_ROOM": "Room ID the notification is posted to.",
    "LSP_NOTIFY_MATRIX_STORE_PATH": "Matrix session directory (default: <data_dir>/matrix_store).",
}
