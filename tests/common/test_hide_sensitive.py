import os
import unittest
from unittest import mock

from common.config.config import Config
from common.config.utils import hide_sensitive_info, LogMsgFilter


class HideSensitiveInfoTestCase(unittest.TestCase):
    _env = {
        "SOLANA_URL": "https://api.devnet.solana.com/secret-token",
        "SECRET_KEY": "4wBqpZM9xaSheZzJSMawUHDgZ7miWfSsxmfVF5jJpYP",
        "HIDE_SENSITIVE_INFO": "YES",
    }

    def setUp(self):
        patcher = mock.patch.dict(os.environ, self._env, clear=True)
        patcher.start()
        self.addCleanup(patcher.stop)

        self.config = Config()
        self.msg_filter = LogMsgFilter(self.config)

    def test_with_none_input(self):
        val = hide_sensitive_info(self.msg_filter, None)  # noqa
        self.assertIsNone(val)

    def test_with_wrong_input_type(self):
        val = hide_sensitive_info(self.msg_filter, 12345)  # noqa
        self.assertEqual(val, 12345)

    def test_without_hiding_info(self):
        val = hide_sensitive_info(self.msg_filter, "test_string")
        self.assertEqual(val, "test_string")

    def test_hiding_info_in_str(self):
        self.assertEqual(len(self.config.sensitive_info_list), 2)
        for item in self.config.sensitive_info_list:
            in_value = "Hello " + item + ", it is nice to see you"
            out_value = hide_sensitive_info(self.msg_filter, in_value)
            self.assertEqual(out_value, "Hello *****, it is nice to see you")

    def test_hiding_info_in_list(self):
        in_value_list = ["Hello " + item + ", it is nice to see you" for item in self.config.sensitive_info_list]
        out_value_list = hide_sensitive_info(self.msg_filter, in_value_list)
        for out_value in out_value_list:
            self.assertEqual(out_value, "Hello *****, it is nice to see you")

    def test_config_to_string(self):
        cfg_str = self.config.to_string()
        self.assertNotIn(self._env["SECRET_KEY"], cfg_str)
        self.assertNotIn(self._env["SOLANA_URL"], cfg_str)
        self.assertIn("TOKEN_DECIMALS=6", cfg_str)

    def test_disabled_filter(self):
        with mock.patch.dict(os.environ, {"HIDE_SENSITIVE_INFO": "NO"}):
            msg_filter = LogMsgFilter(Config())
        self.assertEqual(msg_filter, dict())
        self.assertEqual(hide_sensitive_info(msg_filter, self._env["SECRET_KEY"]), self._env["SECRET_KEY"])


if __name__ == "__main__":
    unittest.main()
