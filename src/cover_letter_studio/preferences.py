"""Persisted user preferences backed by a JSON file."""

import json
import os
from pathlib import Path
from typing import Callable, Dict, List

from dotenv import load_dotenv

from .logging_config import get_logger
from .utils import get_data_directory

# Load environment variables
load_dotenv()

logger = get_logger("preferences")

PREFERENCES_FILENAME = "preferences.json"

DEFAULT_PREFERENCES = {
    "resume_text": "",
    "job_description": "",
    "api_key": "",
    "user_name": "",
    "salutation": "Dear Hiring Manager,",
    "closing": "Sincerely,",
    "file_name": "",
    "theme": "light",
}

# Environment variables consulted when a preference has never been set
ENV_FALLBACKS = {
    "api_key": "GROQ_API_KEY",
    "user_name": "USER_NAME",
}

Subscriber = Callable[[str, str], None]


class PreferenceStore:
    """Key/value store for the values that survive a restart.

    Values are loaded once when the store is created and written back on
    every change. Subscribers are called with ``(key, value)`` after each
    change that actually alters a value.
    """

    def __init__(self, preferences_file: Path = None):
        """Initialize the store.

        Args:
            preferences_file: Path to the JSON file (default: DATA_DIR/preferences.json)
        """
        if preferences_file is None:
            preferences_file = get_data_directory() / PREFERENCES_FILENAME

        self.preferences_file = Path(preferences_file)
        self._subscribers: List[Subscriber] = []
        self._values = self._load_preferences()

    def _load_preferences(self) -> Dict[str, str]:
        """Load preferences from file, falling back to defaults."""
        values = dict(DEFAULT_PREFERENCES)
        for key, env_name in ENV_FALLBACKS.items():
            env_value = os.getenv(env_name)
            if env_value:
                values[key] = env_value.strip('"').strip("'")

        if not self.preferences_file.exists():
            return values

        try:
            with open(self.preferences_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not load preferences from %s: %s", self.preferences_file, e)
            return values

        if not isinstance(data, dict):
            logger.warning("Ignoring malformed preferences file %s", self.preferences_file)
            return values

        for key, value in data.items():
            if key in DEFAULT_PREFERENCES and value is not None:
                values[key] = value if isinstance(value, str) else str(value)
        return values

    def _save_preferences(self) -> None:
        """Save preferences to file."""
        try:
            self.preferences_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.preferences_file, "w", encoding="utf-8") as f:
                json.dump(self._values, f, indent=2)
        except OSError as e:
            logger.warning("Could not save preferences to %s: %s", self.preferences_file, e)

    def get(self, key: str) -> str:
        if key not in DEFAULT_PREFERENCES:
            raise KeyError(f"Unknown preference: {key}")
        return self._values[key]

    def set(self, key: str, value: str) -> None:
        """Store a value, persist it and notify subscribers."""
        if key not in DEFAULT_PREFERENCES:
            raise KeyError(f"Unknown preference: {key}")

        value = "" if value is None else str(value)
        if self._values.get(key) == value:
            return

        self._values[key] = value
        self._save_preferences()

        for callback in list(self._subscribers):
            callback(key, value)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a change callback.

        Returns:
            A callable that removes the subscription
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def as_dict(self) -> Dict[str, str]:
        return dict(self._values)
