#  common/translations/messages.py
from typing import Dict, Optional, Literal

MESSAGES = {
    "report.created": {
        "en": "Report submitted successfully."
    },
    "report.duplicate": {
        "en": "Duplicate report found."
    },
    "report.not_found": {
        "en": "Report not found."
    },
    "report.status_updated": {
        "en": "Report status updated successfully."
    },
    "report.fetched": {
        "en": "Reports retrieved successfully."
    },
    "report.title_required": {
        "en": "Title is required."
    },
    "report.description_required": {
        "en": "Description is required."
    },
    "report.location_required": {
        "en": "Latitude and longitude are required."
    },
    "report.location_invalid": {
        "en": "Latitude must be within [-90, 90] and longitude within [-180, 180]."
    },
    "report.status_invalid": {
        "en": "Invalid status. Must be pending, in-progress, or resolved."
    },
    "report.search_required": {
        "en": "Search text is required."
    },
    "upload.invalid_type": {
        "en": "Only image files are allowed!"
    },
    "upload.too_large": {
        "en": "File too large. Maximum size is {max_mb}MB."
    },
    "auth.no_token": {
        "en": "Access denied. No token provided."
    },
    "auth.token_expired": {
        "en": "Token expired. Please login again."
    },
    "auth.invalid_token": {
        "en": "Invalid token. Please login again."
    },
    "auth.admin_required": {
        "en": "Admin access required."
    },
    "user.not_found": {
        "en": "User not found."
    },
    "user.profile": {
        "en": "Profile retrieved successfully."
    },
    "user.badges": {
        "en": "Badges retrieved successfully."
    },
    "user.leaderboard": {
        "en": "Leaderboard retrieved successfully."
    },
    "user.profile_updated": {
        "en": "Profile updated successfully."
    },
    "user.stats": {
        "en": "User statistics retrieved successfully."
    },
    "admin.users": {
        "en": "Users retrieved successfully."
    },
    "admin.user_promoted": {
        "en": "User promoted to admin."
    },
    "admin.user_demoted": {
        "en": "User removed from admin."
    },
    "server.error": {
        "en": "Internal server error occurred."
    },
}


def get_message(key: str, lang: Literal["en"] = "en", variables: Optional[Dict[str, int | str]] = None) -> str:
    """
    Retrieve a message based on key and language, with optional variable substitution.

    Args:
        key (str): Message key (e.g., 'report.duplicate')
        lang (Literal["en"]): Language code
        variables (Optional[Dict[str, int | str]]): Variables to substitute in the message

    Returns:
        str: Message or key as fallback
    """
    message = MESSAGES.get(key, {}).get(lang) or MESSAGES.get(key, {}).get("en") or key
    if variables and isinstance(message, str):
        try:
            return message.format(**variables)
        except (KeyError, ValueError):
            return message
    return message
