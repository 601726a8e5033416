"""
单元测试：邮件服务配置

测试覆盖：
- 默认值
- 环境变量覆盖与派生路径
- 无效配置抛出 ConfigurationErrorException
"""
import os
from unittest import TestCase, mock

from app_mailserver.config import get_app_config
from common.exceptions.configuration_error_exception import ConfigurationErrorException

MAIL_ENV_KEYS = (
    'MAIL_SERVER_HOST', 'MAIL_SMTP_PORT', 'MAIL_WEB_PORT', 'MAIL_MAILDIR_BASE', 'MAIL_USER',
    'MAIL_DOMAIN', 'MAIL_LOG_LEVEL', 'MAIL_SMTP_DEBUG', 'MAIL_HOST_TAG', 'MAIL_FILE_UID',
    'MAIL_FILE_GID', 'MAIL_FILE_MODE',
)


class TestMailConfig(TestCase):
    """测试 get_app_config"""

    def setUp(self):
        """每个测试前设置：清除邮件相关环境变量，不读取 .env 文件"""
        self.env_patcher = mock.patch.dict(os.environ, {})
        self.env_patcher.start()
        for key in MAIL_ENV_KEYS:
            os.environ.pop(key, None)
        self.load_patcher = mock.patch('app_mailserver.config.load_env', side_effect=self._load_env)
        self.load_patcher.start()

    def tearDown(self):
        """每个测试后恢复"""
        self.load_patcher.stop()
        self.env_patcher.stop()

    @staticmethod
    def _load_env(base_dir):
        import environ
        return environ.Env()

    def test_defaults(self):
        """测试默认配置"""
        config = get_app_config()

        self.assertEqual(config['server_host'], '0.0.0.0')
        self.assertEqual(config['smtp_port'], 2587)
        self.assertEqual(config['web_port'], 8082)
        self.assertEqual(config['mailbox_address'], 'inbox@mailrider.local')
        self.assertEqual(config['maildir_path'], os.path.join('/var/mail/mailrider', 'inbox', 'Maildir'))
        self.assertEqual(config['metadata_file'], os.path.join('/var/mail/mailrider', 'inbox', '.read-status.json'))
        self.assertEqual(config['log_level'], 'INFO')
        self.assertFalse(config['smtp_debug'])
        self.assertEqual(config['host_tag'], 'mailrider')
        self.assertIsNone(config['file_uid'])
        self.assertIsNone(config['file_gid'])
        self.assertEqual(config['file_mode'], 0o600)

    def test_overrides(self):
        """测试环境变量覆盖"""
        os.environ.update({
            'MAIL_SMTP_PORT': '2525',
            'MAIL_MAILDIR_BASE': '/srv/mail',
            'MAIL_USER': 'catchall',
            'MAIL_DOMAIN': 'example.test',
            'MAIL_LOG_LEVEL': 'debug',
            'MAIL_SMTP_DEBUG': 'true',
            'MAIL_FILE_UID': '1000',
            'MAIL_FILE_GID': '',
            'MAIL_FILE_MODE': '640',
        })

        config = get_app_config()

        self.assertEqual(config['smtp_port'], 2525)
        self.assertEqual(config['mailbox_address'], 'catchall@example.test')
        self.assertEqual(config['maildir_path'], os.path.join('/srv/mail', 'catchall', 'Maildir'))
        self.assertEqual(config['log_level'], 'DEBUG')
        self.assertTrue(config['smtp_debug'])
        self.assertEqual(config['file_uid'], 1000)
        self.assertIsNone(config['file_gid'])
        self.assertEqual(config['file_mode'], 0o640)

    def test_invalid_port(self):
        """测试无效端口"""
        os.environ['MAIL_SMTP_PORT'] = 'not-a-port'
        with self.assertRaises(ConfigurationErrorException):
            get_app_config()

    def test_invalid_file_mode(self):
        """测试无效权限"""
        os.environ['MAIL_FILE_MODE'] = '999'
        with self.assertRaises(ConfigurationErrorException):
            get_app_config()

    def test_invalid_user(self):
        """测试无效用户名"""
        os.environ['MAIL_USER'] = '../escape'
        with self.assertRaises(ConfigurationErrorException):
            get_app_config()
