"""Tests for reading runtime settings from the environment."""

import os
import unittest
from unittest.mock import patch

from habit_tracker.config import DEFAULT_MONGO_URI, Settings, load_settings


class SettingsTests(unittest.TestCase):
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = load_settings()
        self.assertEqual(settings.mongo_uri, DEFAULT_MONGO_URI)
        self.assertEqual(settings.port, 4000)
        self.assertEqual(settings.db_name, "habit_tracker")

    def test_environment_overrides(self):
        env = {"MONGO_URI": "mongodb://db:27017/habits_prod", "PORT": "8080", "LOG_LEVEL": "debug"}
        with patch.dict(os.environ, env, clear=True):
            settings = load_settings()
        self.assertEqual(settings.port, 8080)
        self.assertEqual(settings.log_level, "DEBUG")
        self.assertEqual(settings.db_name, "habits_prod")

    def test_db_name_falls_back_when_uri_has_no_path(self):
        self.assertEqual(Settings(mongo_uri="mongodb://localhost:27017").db_name, "habit_tracker")
        self.assertEqual(
            Settings(mongo_uri="mongodb://localhost:27017/?retryWrites=true").db_name,
            "habit_tracker",
        )
