"""
单元测试：MailQueryService 邮件查询服务

测试覆盖：
- list_all 跨文件夹排序、幂等
- find_by_filename / locate（new/、cur/ 带标记后缀、额外文件夹）
- get_detail / export_raw
- mark_read / mark_unread
- delete_one / delete_all
- import_messages
"""
import os
import tempfile
from unittest import TestCase, mock

from app_mailserver.exceptions.invalid_identifier_exception import InvalidIdentifierException
from app_mailserver.exceptions.message_not_found_exception import MessageNotFoundException
from app_mailserver.exceptions.store_write_exception import StoreWriteException
from app_mailserver.services.read_status_store import ReadStatusStore
from app_mailserver.tests.mail_fixtures import (
    build_email_with_attachments,
    build_query_service,
    build_text_email,
    write_message,
)


class TestMailQueryService(TestCase):
    """测试 MailQueryService"""

    def setUp(self):
        """每个测试前设置"""
        self.temp_dir = tempfile.TemporaryDirectory()
        self.service = build_query_service(self.temp_dir.name)
        self.maildir_path = self.service.writer.maildir_path
        self.store = self.service.read_status_store

    def tearDown(self):
        """每个测试后清理"""
        ReadStatusStore.clear_instances()
        self.temp_dir.cleanup()

    def test_list_all_orders_newest_first(self):
        """测试按时间倒序：T3, T2, T1"""
        write_message(self.maildir_path, 'new', '1000.t1.host', build_text_email(subject='T1'))
        write_message(self.maildir_path, 'cur', '3000.t3.host:2,S', build_text_email(subject='T3'))
        write_message(self.maildir_path, '.Sent/cur', '2000.t2.host', build_text_email(subject='T2'))

        result = self.service.list_all()

        self.assertEqual(result['total'], 3)
        self.assertEqual([m['subject'] for m in result['messages']], ['T3', 'T2', 'T1'])
        self.assertEqual(result['messages'][1]['folder'], 'Sent')
        self.assertEqual(result['total_size'], sum(m['size'] for m in result['messages']))

    def test_list_all_is_idempotent(self):
        """测试重复列出结果一致"""
        write_message(self.maildir_path, 'new', '1000.a.host', build_text_email(subject='A'))
        write_message(self.maildir_path, 'new', '1000.b.host', build_text_email(subject='B'))

        self.assertEqual(self.service.list_all(), self.service.list_all())

    def test_list_all_empty(self):
        """测试空邮箱"""
        self.assertEqual(self.service.list_all(), {'total': 0, 'total_size': 0, 'messages': []})

    def test_list_folders(self):
        """测试列出文件夹"""
        os.makedirs(os.path.join(self.maildir_path, '.Archive'))
        folders = self.service.list_folders()
        self.assertEqual([f['name'] for f in folders], ['INBOX', 'Archive'])

    def test_find_by_filename_prefers_new(self):
        """测试 new/ 优先于 cur/"""
        write_message(self.maildir_path, 'new', '1000.a.host', b'Subject: new\r\n\r\n')
        write_message(self.maildir_path, 'cur', '1000.a.host', b'Subject: cur\r\n\r\n')

        location = self.service.find_by_filename('1000.a.host')

        self.assertEqual(location.subfolder, 'new')
        self.assertEqual(location.folder.name, 'INBOX')

    def test_find_by_filename_with_flag_suffix(self):
        """测试 cur/ 中带 :2,flags 后缀的文件"""
        write_message(self.maildir_path, 'cur', '1000.a.host:2,S', b'Subject: seen\r\n\r\n')

        location = self.service.find_by_filename('1000.a.host')

        self.assertEqual(location.subfolder, 'cur')
        self.assertEqual(location.filename, '1000.a.host:2,S')
        self.assertEqual(self.service.locate('1000.a.host:2,S').filename, '1000.a.host:2,S')

    def test_find_by_filename_in_extra_folder(self):
        """测试在额外文件夹中查找"""
        write_message(self.maildir_path, '.Sent/new', '1000.s.host', b'Subject: sent\r\n\r\n')

        location = self.service.locate('1000.s.host')

        self.assertEqual(location.folder.name, 'Sent')

    def test_find_by_filename_missing(self):
        """测试不存在的文件"""
        self.assertIsNone(self.service.find_by_filename('1000.none.host'))
        with self.assertRaises(MessageNotFoundException):
            self.service.locate('1000.none.host')

    def test_invalid_filename_rejected_before_filesystem(self):
        """测试非法文件名在访问文件系统前被拒绝"""
        with mock.patch.object(self.service.folder_enumerator, 'list_folders') as list_folders:
            with self.assertRaises(InvalidIdentifierException):
                self.service.find_by_filename('../../etc/passwd')
            with self.assertRaises(InvalidIdentifierException):
                self.service.get_detail('.read-status.json')
        list_folders.assert_not_called()

    def test_get_detail(self):
        """测试获取邮件详情"""
        content = build_email_with_attachments()
        write_message(self.maildir_path, 'new', '1000.d.host', content)
        self.store.mark_read('1000.d.host')

        detail = self.service.get_detail('1000.d.host')

        self.assertEqual(detail['filename'], '1000.d.host')
        self.assertEqual(detail['folder'], 'INBOX')
        self.assertEqual(detail['message_id'], '<attachments@example.com>')
        self.assertEqual(detail['from'], 'Sender <sender@example.com>')
        self.assertEqual(detail['cc'], 'cc@example.com')
        self.assertEqual(detail['subject'], 'With attachments')
        self.assertIsNone(detail['date'])
        self.assertIn('See attached.', detail['text_body'])
        self.assertEqual(detail['size'], len(content))
        self.assertEqual(detail['headers']['subject'], 'With attachments')
        self.assertTrue(detail['is_read'])
        self.assertEqual(
            [(a['index'], a['filename'], a['is_image']) for a in detail['attachments']],
            [(0, 'report.pdf', False), (1, 'photo.png', True)],
        )
        self.assertEqual(detail['attachments'][1]['content_id'], 'photo@example.com')

    def test_get_detail_without_cc(self):
        """测试无抄送时 cc 为 None，日期为 ISO 字符串"""
        write_message(self.maildir_path, 'new', '1000.d.host', build_text_email())

        detail = self.service.get_detail('1000.d.host')

        self.assertIsNone(detail['cc'])
        self.assertEqual(detail['date'], '2024-01-01T12:00:00+00:00')
        self.assertFalse(detail['is_read'])

    def test_export_raw(self):
        """测试导出原始字节"""
        content = b'Subject: raw\r\n\r\nbody \xff\r\n'
        write_message(self.maildir_path, 'cur', '1000.r.host:2,S', content)

        data, filename = self.service.export_raw('1000.r.host')

        self.assertEqual(data, content)
        self.assertEqual(filename, '1000.r.host:2,S')

    def test_mark_read_and_unread(self):
        """测试标记已读和未读"""
        write_message(self.maildir_path, 'new', '1000.m.host', build_text_email())

        self.assertTrue(self.service.mark_read('1000.m.host'))
        self.assertTrue(self.service.list_all()['messages'][0]['is_read'])

        self.assertFalse(self.service.mark_unread('1000.m.host'))
        self.assertFalse(self.service.list_all()['messages'][0]['is_read'])

    def test_mark_read_rejects_invalid_filename(self):
        """测试标记非法文件名"""
        with self.assertRaises(InvalidIdentifierException):
            self.service.mark_read('a/b')
        self.assertEqual(self.store.snapshot(), {})

    def test_mark_read_message_with_flag_suffix(self):
        """测试 cur/ 中带后缀的邮件按基础文件名标记已读"""
        write_message(self.maildir_path, 'cur', '1000.a.host:2,S', build_text_email())

        self.assertTrue(self.service.mark_read('1000.a.host'))

        self.assertTrue(self.service.get_detail('1000.a.host')['is_read'])
        self.assertTrue(self.service.get_detail('1000.a.host:2,S')['is_read'])
        self.assertTrue(self.service.list_all()['messages'][0]['is_read'])
        self.assertEqual(self.store.snapshot(), {'1000.a.host': True})

        self.assertFalse(self.service.mark_unread('1000.a.host:2,S'))
        self.assertFalse(self.service.get_detail('1000.a.host')['is_read'])

    def test_read_flag_survives_move_to_cur(self):
        """测试邮件从 new/ 移到 cur/ 后已读状态保留"""
        path = self.service.writer.commit(build_text_email())
        filename = os.path.basename(path)
        self.service.mark_read(filename)

        os.rename(path, os.path.join(self.maildir_path, 'cur', f'{filename}:2,S'))

        message = self.service.list_all()['messages'][0]
        self.assertEqual(message['filename'], f'{filename}:2,S')
        self.assertTrue(message['is_read'])
        self.assertTrue(self.service.get_detail(filename)['is_read'])

    def test_delete_one_with_flag_suffix_drops_flag(self):
        """测试删除 cur/ 中带后缀的邮件时清除已读标记"""
        write_message(self.maildir_path, 'cur', '1000.d.host:2,S', build_text_email())
        self.service.mark_read('1000.d.host')

        deleted = self.service.delete_one('1000.d.host')

        self.assertEqual(deleted, '1000.d.host:2,S')
        self.assertEqual(self.store.snapshot(), {})

    def test_delete_one(self):
        """测试删除单封邮件及其已读标记"""
        path = write_message(self.maildir_path, 'new', '1000.x.host', build_text_email())
        self.service.mark_read('1000.x.host')

        deleted = self.service.delete_one('1000.x.host')

        self.assertEqual(deleted, '1000.x.host')
        self.assertFalse(os.path.exists(path))
        self.assertFalse(self.store.is_read('1000.x.host'))
        with self.assertRaises(MessageNotFoundException):
            self.service.delete_one('1000.x.host')

    def test_delete_all(self):
        """测试删除全部后列表为空，已读状态清空"""
        write_message(self.maildir_path, 'new', '1000.a.host', build_text_email())
        write_message(self.maildir_path, 'cur', '2000.b.host:2,S', build_text_email())
        write_message(self.maildir_path, '.Sent/cur', '3000.c.host', build_text_email())
        write_message(self.maildir_path, 'cur', 'dovecot-uidlist', b'3 V1 N2\n')
        self.service.mark_read('1000.a.host')

        deleted_count = self.service.delete_all()

        self.assertEqual(deleted_count, 3)
        self.assertEqual(self.service.list_all()['total'], 0)
        self.assertEqual(self.store.snapshot(), {})
        # metadata files stay
        self.assertTrue(os.path.exists(os.path.join(self.maildir_path, 'cur', 'dovecot-uidlist')))

    def test_import_messages(self):
        """测试导入：成功和空消息"""
        result = self.service.import_messages([
            ('good.eml', build_text_email(subject='Imported')),
            ('empty.eml', b''),
        ])

        self.assertEqual(result['imported'], 1)
        self.assertEqual(result['failed'], 1)
        self.assertEqual(result['errors'], [{'name': 'empty.eml', 'error': 'Empty message'}])
        self.assertEqual(len(result['filenames']), 1)

        listing = self.service.list_all()
        self.assertEqual(listing['messages'][0]['filename'], result['filenames'][0])
        self.assertEqual(listing['messages'][0]['subject'], 'Imported')

    def test_import_messages_write_failure(self):
        """测试导入时写入失败记录到错误列表"""
        with mock.patch.object(self.service.writer, 'commit', side_effect=StoreWriteException('disk full')):
            result = self.service.import_messages([('a.eml', b'Subject: a\r\n\r\n')])

        self.assertEqual(result['imported'], 0)
        self.assertEqual(result['errors'], [{'name': 'a.eml', 'error': 'disk full'}])
