import unittest

from canvas_planner.utils.config import Config, ConfigError

ENV = {
    'CANVAS_API_URL': 'https://canvas.example.com/api/v1/',
    'CANVAS_API_TOKEN': 'canvas-token',
    'NOTION_API_KEY': 'secret',
    'NOTION_DATABASE_ID': 'main-db',
}


class TestConfig(unittest.TestCase):

    def test_defaults(self):
        config = Config.from_env(ENV)

        self.assertEqual(config.ai_provider, 'openai')
        self.assertEqual(config.openai_model, 'gpt-4o-mini')
        self.assertEqual(config.ollama_base_url, 'http://localhost:11434')
        self.assertEqual(config.cache_file, '.assignment-cache.json')
        self.assertEqual(config.request_delay, 0.3)
        self.assertEqual(config.upcoming_days, 14)
        self.assertIs(config.validate(), config)

    def test_canvas_url_loses_api_version(self):
        self.assertEqual(Config.from_env(ENV).canvas_url, 'https://canvas.example.com')

    def test_task_database_defaults_to_main_database(self):
        self.assertEqual(Config.from_env(ENV).task_database_id, 'main-db')
        config = Config.from_env(dict(ENV, NOTION_TASK_DATABASE_ID='tasks-db'))
        self.assertEqual(config.task_database_id, 'tasks-db')

    def test_missing_credentials_are_all_named(self):
        with self.assertRaises(ConfigError) as ctx:
            Config.from_env({'NOTION_API_KEY': 'secret'}).validate()

        message = str(ctx.exception)
        for name in ('CANVAS_API_URL', 'CANVAS_API_TOKEN', 'NOTION_DATABASE_ID'):
            self.assertIn(name, message)
        self.assertNotIn('NOTION_API_KEY', message)

    def test_bad_numbers_are_rejected(self):
        with self.assertRaises(ConfigError):
            Config.from_env(dict(ENV, SYNC_REQUEST_DELAY='fast'))
        with self.assertRaises(ConfigError):
            Config.from_env(dict(ENV, UPCOMING_DAYS='0'))

    def test_unknown_timezone_is_rejected(self):
        with self.assertRaises(ConfigError):
            Config.from_env(dict(ENV, TIMEZONE='Mars/Olympus'))


if __name__ == '__main__':
    unittest.main()
