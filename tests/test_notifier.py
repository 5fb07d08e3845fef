import json
import unittest

import httpx

from services.notifier import AdminNotifier

URL = "http://notify.test/api/send-admin-notification"
PAYLOAD = {"applicationId": "inv-abc", "fullName": "Ada Obi"}


def _notifier(handler):
    return AdminNotifier(URL, timeout=5.0, transport=httpx.MockTransport(handler))


class TestAdminNotifier(unittest.IsolatedAsyncioTestCase):
    async def test_posts_payload_as_json(self):
        seen = []

        def handler(request):
            seen.append(json.loads(request.content))
            return httpx.Response(200, json={"success": True, "messageId": "<1@x>"})

        self.assertTrue(await _notifier(handler).notify(PAYLOAD))
        self.assertEqual(seen, [PAYLOAD])

    async def test_success_with_warning_still_counts(self):
        def handler(request):
            return httpx.Response(200, json={"success": True, "warning": "Email service is not configured"})

        self.assertTrue(await _notifier(handler).notify(PAYLOAD))

    async def test_error_status_is_swallowed(self):
        def handler(request):
            return httpx.Response(400, json={"error": "Missing required fields: applicationId"})

        self.assertFalse(await _notifier(handler).notify(PAYLOAD))

    async def test_non_json_body_is_swallowed(self):
        def handler(request):
            return httpx.Response(502, text="<html>Bad gateway</html>")

        self.assertFalse(await _notifier(handler).notify(PAYLOAD))

    async def test_malformed_success_body(self):
        def handler(request):
            return httpx.Response(200, text="ok")

        self.assertFalse(await _notifier(handler).notify(PAYLOAD))

    async def test_network_error_is_swallowed(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        self.assertFalse(await _notifier(handler).notify(PAYLOAD))


if __name__ == "__main__":
    unittest.main()
