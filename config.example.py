# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKWATCH_APP_NAME": "App display name (default: taskwatch).",
    "TASKWATCH_LOG_LEVEL": "Console logging level (default: INFO).",
    "TASKWATCH_LOG_DIR": "Directory for taskwatch.log (default: .local/taskwatch).",
    # Demo task
    "TASKWATCH_MS_PER_TICK": "Default milliseconds per tick of the counting task (default: 30).",
    "TASKWATCH_TICK_COUNT": "Ticks per counting task (default: 100).",
    # Coordinator
    "TASKWATCH_INITIAL_STATUS": "Status shown when a task starts (default: Working...).",
    "TASKWATCH_CANCELING_STATUS": "Status shown while waiting for a canceled task (default: Canceling...).",
    "TASKWATCH_COALESCE_PROGRESS": "Coalesce progress updates under load (true/false, default: true).",
}
