import dataclasses
import os
import unittest
from unittest import mock

from awsig.config import Config
from awsig.exceptions import ConfigError, SigningError

ENVIRON = {
    'AWS_ACCESS_KEY_ID': 'AKIDEXAMPLE',
    'AWS_SECRET_ACCESS_KEY': 'wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY',
    'AWS_REGION': 'eu-central-1',
}


class TestConfig(unittest.TestCase):

    def test_from_environ(self) -> None:
        config = Config.from_environ(ENVIRON)

        self.assertEqual(config.access_key, 'AKIDEXAMPLE')
        self.assertEqual(config.secret_key, 'wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY')
        self.assertEqual(config.region, 'eu-central-1')
        self.assertIsNone(config.timeout)
        self.assertIsNone(config.session_token)

    def test_default_region_fallback(self) -> None:
        env = dict(ENVIRON)
        del env['AWS_REGION']
        env['AWS_DEFAULT_REGION'] = 'ap-southeast-2'
        self.assertEqual(Config.from_environ(env).region, 'ap-southeast-2')

    def test_region_is_optional(self) -> None:
        env = dict(ENVIRON)
        del env['AWS_REGION']
        self.assertIsNone(Config.from_environ(env).region)

    def test_token_and_timeout(self) -> None:
        env = dict(ENVIRON, AWS_SESSION_TOKEN='TOKEN', AWSIG_TIMEOUT='2.5')
        config = Config.from_environ(env)
        self.assertEqual(config.session_token, 'TOKEN')
        self.assertEqual(config.timeout, 2.5)

    def test_invalid_timeout(self) -> None:
        with self.assertRaises(ConfigError):
            Config.from_environ(dict(ENVIRON, AWSIG_TIMEOUT='soon'))

    def test_missing_keys(self) -> None:
        with self.assertRaises(ConfigError) as ctx:
            Config.from_environ({'AWS_REGION': 'us-east-1'})
        self.assertIn('AWS_ACCESS_KEY_ID', str(ctx.exception))
        self.assertIn('AWS_SECRET_ACCESS_KEY', str(ctx.exception))
        self.assertIsInstance(ctx.exception, SigningError)

    def test_reads_process_environment_by_default(self) -> None:
        with mock.patch.dict(os.environ, ENVIRON, clear=True):
            self.assertEqual(Config.from_environ().access_key, 'AKIDEXAMPLE')

    def test_repr_hides_secrets(self) -> None:
        config = Config.from_environ(dict(ENVIRON, AWS_SESSION_TOKEN='TOKEN'))
        text = repr(config)
        self.assertNotIn(ENVIRON['AWS_SECRET_ACCESS_KEY'], text)
        self.assertNotIn('TOKEN', text)
        self.assertIn('AKIDEXAMPLE', text)

    def test_immutable(self) -> None:
        config = Config.from_environ(ENVIRON)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            config.region = 'us-west-2'


if __name__ == '__main__':
    unittest.main(verbosity=2)
