import json
from unittest import TestCase

from django.test import override_settings
from rest_framework.renderers import JSONRenderer

from common.utils.http_util import resp_ok, resp_warn, resp_err, resp_exception


def _body(response):
    response.accepted_renderer = JSONRenderer()
    response.accepted_media_type = "application/json"
    response.renderer_context = {}
    response.render()
    return json.loads(response.content)


class Test(TestCase):
    def test_resp_ok(self):
        response = resp_ok({"total": 1})
        self.assertEqual(200, response.status_code)
        self.assertEqual({"data": {"total": 1}, "code": 0, "errmsg": ""}, _body(response))
        self.assertIn("Expires", response)

    def test_resp_warn(self):
        response = resp_warn("1 of 2 messages failed to import", {"imported": 1})
        self.assertEqual({"data": {"imported": 1}, "code": 0, "errmsg": "1 of 2 messages failed to import"},
                         _body(response))

    def test_resp_err(self):
        response = resp_err("Email not found", code=301)
        self.assertEqual(200, response.status_code)
        self.assertEqual({"data": None, "code": 301, "errmsg": "Email not found"}, _body(response))

    @override_settings(DEBUG=False)
    def test_resp_exception(self):
        response = resp_exception(ValueError("boom"))
        self.assertEqual({"data": None, "code": -1, "errmsg": "boom"}, _body(response))

    @override_settings(DEBUG=True)
    def test_resp_exception_debug(self):
        response = resp_exception(ValueError("boom"))
        self.assertEqual("ValueError('boom')", _body(response)["errmsg"])
