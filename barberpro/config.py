"""
Configuration for the barbershop framework.
Organized into discrete feature sections for clarity.
"""

import os
from pathlib import Path
from typing import Dict, Any, Optional
from dotenv import load_dotenv


# =============================================================================
# SECTION 1: ENVIRONMENT & CREDENTIALS
# =============================================================================

# Load environment variables from the project root
parent_dir = Path(__file__).parent.parent
env_path = parent_dir / ".env"
if env_path.exists():
    load_dotenv(env_path)

# Owner the local data is backed up for (normally set by login)
OWNER_ID: Optional[str] = os.getenv("BARBERPRO_OWNER_ID")


# =============================================================================
# SECTION 2: PROVIDER SELECTION
# =============================================================================
# Choose which provider implementation to use for each collaborator.

NOTIFICATION_PROVIDER = "desktop"      # Options: "desktop", "null"
AUDIO_PROVIDER = "system_tones"        # Options: "system_tones", "null"
LOCAL_STORE_PROVIDER = "json_file"     # Options: "json_file", "memory"
# Without credentials the backup only lives for the session
REMOTE_STORE_PROVIDER = (
    "supabase" if os.getenv("SUPABASE_URL") and os.getenv("SUPABASE_KEY") else "memory"
)


# =============================================================================
# SECTION 3: APPOINTMENT REMINDERS
# =============================================================================

REMINDER_CONFIG = {
    "enabled": True,
    "poll_interval_seconds": 30,        # How often appointments are checked
    "lookahead_min_minutes": 4,         # Alert when start is more than this away...
    "lookahead_max_minutes": 6,         # ...and at most this away
    "alarm_repeat_seconds": 3,          # Chime repeat while the alarm is active
    "continuous_alarm": True,           # False = single chime per alert
    "os_notifications": True,
}

NOTIFICATION_CONFIG = {
    "app_name": "BarberPro",
    "urgency": "critical",              # notify-send: stay on screen until clicked
    "timeout": 5,
}

AUDIO_CONFIG = {
    "enabled": True,
}


# =============================================================================
# SECTION 4: CLOUD BACKUP
# =============================================================================

BACKUP_CONFIG = {
    "enabled": True,
    "sync_interval_hours": 24,          # Minimum time between automatic pushes
    "check_interval_seconds": 3600,     # Periodic throttle check
    "last_sync_key": "barber-last-cloud-sync",
}

# Supabase configuration (set via environment variables)
SUPABASE_CONFIG = {
    "url": os.getenv("SUPABASE_URL"),
    "key": os.getenv("SUPABASE_KEY"),
    "table_name": "user_data",
    "owner_column": "user_id",
}


# =============================================================================
# SECTION 5: LOCAL STORAGE
# =============================================================================

LOCAL_STORE_CONFIG = {
    "path": os.getenv(
        "BARBERPRO_DATA_FILE",
        str(parent_dir / "data" / "barber_state.json"),
    ),
    "indent": 2,
}


# =============================================================================
# SECTION 6: LOGGING
# =============================================================================

LOGGING_CONFIG = {
    "level": os.getenv("BARBERPRO_LOG_LEVEL", "INFO"),
    "log_file": os.getenv("BARBERPRO_LOG_FILE"),
    "use_colors": True,
    "use_emojis": True,
}


# =============================================================================
# SECTION 7: FRAMEWORK ASSEMBLY
# =============================================================================

def get_framework_config() -> Dict[str, Any]:
    """
    Assemble the complete framework configuration.

    Returns:
        Dictionary containing all provider and component configurations
    """
    return {
        "owner_id": OWNER_ID,
        "notification": {
            "provider": NOTIFICATION_PROVIDER,
            "config": NOTIFICATION_CONFIG.copy()
        },
        "audio": {
            "provider": AUDIO_PROVIDER,
            "config": AUDIO_CONFIG.copy()
        },
        "remote_store": {
            "provider": REMOTE_STORE_PROVIDER,
            "config": SUPABASE_CONFIG.copy() if REMOTE_STORE_PROVIDER == "supabase" else {}
        },
        "local_store": {
            "provider": LOCAL_STORE_PROVIDER,
            "config": LOCAL_STORE_CONFIG.copy()
        },
        "reminders": REMINDER_CONFIG.copy(),
        "backup": BACKUP_CONFIG.copy(),
        "logging": LOGGING_CONFIG.copy(),
    }


def get_testing_config() -> Dict[str, Any]:
    """Get configuration for testing: in-memory stores, silent providers."""
    config = get_framework_config()
    config["owner_id"] = None
    config["notification"] = {"provider": "null", "config": {"grant_permission": True}}
    config["audio"] = {"provider": "null", "config": {}}
    config["remote_store"] = {"provider": "memory", "config": {}}
    config["local_store"] = {"provider": "memory", "config": {}}
    config["logging"]["level"] = "DEBUG"
    config["logging"]["use_colors"] = False
    return config


# =============================================================================
# SECTION 8: RUNTIME PROVIDER SWITCHING
# =============================================================================

def set_providers(
    notification: Optional[str] = None,
    audio: Optional[str] = None,
    remote_store: Optional[str] = None,
    local_store: Optional[str] = None
):
    """Override provider selection at runtime."""
    global NOTIFICATION_PROVIDER, AUDIO_PROVIDER, REMOTE_STORE_PROVIDER, LOCAL_STORE_PROVIDER

    if notification:
        NOTIFICATION_PROVIDER = notification
    if audio:
        AUDIO_PROVIDER = audio
    if remote_store:
        REMOTE_STORE_PROVIDER = remote_store
    if local_store:
        LOCAL_STORE_PROVIDER = local_store


# =============================================================================
# SECTION 9: VALIDATION & DIAGNOSTICS
# =============================================================================

def validate_environment() -> Dict[str, Any]:
    """Validate the environment and configuration."""
    results = {"valid": True, "errors": [], "warnings": [], "info": []}

    if REMOTE_STORE_PROVIDER == "supabase":
        if not SUPABASE_CONFIG["url"]:
            results["errors"].append("Missing required: SUPABASE_URL")
            results["valid"] = False
        if not SUPABASE_CONFIG["key"]:
            results["errors"].append("Missing required: SUPABASE_KEY")
            results["valid"] = False
        if results["valid"]:
            results["info"].append("Supabase backup: configured")
    else:
        results["warnings"].append("SUPABASE_URL/SUPABASE_KEY not set (cloud backup kept in memory only)")

    if not OWNER_ID:
        results["warnings"].append("BARBERPRO_OWNER_ID not set (log in to enable backup)")

    data_dir = Path(LOCAL_STORE_CONFIG["path"]).parent
    if LOCAL_STORE_PROVIDER == "json_file" and data_dir.exists() and not os.access(data_dir, os.W_OK):
        results["errors"].append(f"Data directory not writable: {data_dir}")
        results["valid"] = False
    else:
        results["info"].append(f"Local data: {LOCAL_STORE_CONFIG['path']}")

    return results


def print_config_summary():
    """Print a summary of the current configuration."""
    print("=" * 60)
    print("💈 BarberPro Configuration")
    print("=" * 60)

    print(f"Notifications: {NOTIFICATION_PROVIDER}")
    print(f"Audio: {AUDIO_PROVIDER}")
    print(f"Remote store: {REMOTE_STORE_PROVIDER}")
    print(f"Local store: {LOCAL_STORE_PROVIDER}")
    print()
    print(f"Reminder window: {REMINDER_CONFIG['lookahead_min_minutes']}-"
          f"{REMINDER_CONFIG['lookahead_max_minutes']} min "
          f"(poll every {REMINDER_CONFIG['poll_interval_seconds']}s)")
    print(f"Backup interval: {BACKUP_CONFIG['sync_interval_hours']}h")
    print()

    validation = validate_environment()
    if validation["valid"]:
        print("✅ Configuration Valid")
    else:
        print("❌ Configuration Issues:")
        for error in validation["errors"]:
            print(f"  - {error}")

    if validation["warnings"]:
        print("\n⚠️  Warnings:")
        for warning in validation["warnings"]:
            print(f"  - {warning}")

    print("=" * 60)
