from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from niaxtu_admin.settings import SettingsError, load_settings


class LoadSettingsTest(unittest.TestCase):
    def test_defaults_without_env(self) -> None:
        settings = load_settings(env={}, dotenv_path="does-not-exist.env")

        self.assertEqual(settings.app_env, "development")
        self.assertEqual(settings.log_level, "INFO")
        self.assertEqual(settings.slow_request_ms, 5000)
        self.assertEqual(settings.default_statistics_period, "30d")
        self.assertEqual(settings.admin_path_prefix, "/api/v1/admin/")

    def test_env_override(self) -> None:
        settings = load_settings(
            env={
                "APP_ENV": "production",
                "LOG_LEVEL": "debug",
                "SLOW_REQUEST_MS": "1500",
                "DEFAULT_STATISTICS_PERIOD": "7D",
                "LOG_ADMIN_PATH_PREFIX": "/api/v1/backoffice/",
            },
            dotenv_path="does-not-exist.env",
        )

        self.assertEqual(settings.app_env, "production")
        self.assertEqual(settings.log_level, "DEBUG")
        self.assertEqual(settings.slow_request_ms, 1500)
        self.assertEqual(settings.default_statistics_period, "7d")
        self.assertEqual(settings.admin_path_prefix, "/api/v1/backoffice/")

    def test_dotenv_loaded_when_env_missing(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            dotenv = Path(tmpdir) / ".env"
            dotenv.write_text(
                "# local overrides\nexport APP_ENV='staging'\nSLOW_REQUEST_MS=2500\nnot-a-pair\n",
                encoding="utf-8",
            )

            settings = load_settings(env={}, dotenv_path=dotenv)

        self.assertEqual(settings.app_env, "staging")
        self.assertEqual(settings.slow_request_ms, 2500)
        self.assertEqual(settings.log_level, "INFO")

    def test_env_has_priority_over_dotenv(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            dotenv = Path(tmpdir) / ".env"
            dotenv.write_text("SLOW_REQUEST_MS=2500\n", encoding="utf-8")

            settings = load_settings(
                env={"SLOW_REQUEST_MS": "800"},
                dotenv_path=dotenv,
            )

        self.assertEqual(settings.slow_request_ms, 800)

    def test_invalid_integer_raises(self) -> None:
        for raw in ("abc", "0", "-5"):
            with self.subTest(raw=raw):
                with self.assertRaises(SettingsError):
                    load_settings(env={"SLOW_REQUEST_MS": raw}, dotenv_path="does-not-exist.env")

    def test_invalid_choices_raise(self) -> None:
        with self.assertRaises(SettingsError):
            load_settings(env={"LOG_LEVEL": "verbose"}, dotenv_path="does-not-exist.env")
        with self.assertRaises(SettingsError):
            load_settings(env={"DEFAULT_STATISTICS_PERIOD": "2w"}, dotenv_path="does-not-exist.env")

    def test_admin_prefix_must_be_absolute(self) -> None:
        with self.assertRaises(SettingsError):
            load_settings(env={"LOG_ADMIN_PATH_PREFIX": "admin/"}, dotenv_path="does-not-exist.env")

    def test_empty_value_raises(self) -> None:
        with self.assertRaises(SettingsError):
            load_settings(env={"APP_ENV": "  "}, dotenv_path="does-not-exist.env")


if __name__ == "__main__":
    unittest.main()
