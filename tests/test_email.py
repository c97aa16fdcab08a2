import os
import sys
import unittest
from unittest.mock import MagicMock, patch

import requests

# Add parent directory to path to import modules
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from utils import email


class TestBrevoEmail(unittest.TestCase):
    @patch.object(email, "BREVO_API_KEY", "xkeysib-test")
    @patch("utils.email.requests.post")
    def test_send_email_success(self, mock_post):
        mock_post.return_value = MagicMock(status_code=201, content=b"{}")

        ok, error = email.send_email("ops@example.com", "Hi", "<p>Hi</p>", timeout=3)

        self.assertTrue(ok)
        self.assertIsNone(error)
        kwargs = mock_post.call_args.kwargs
        self.assertEqual(kwargs["timeout"], 3)
        self.assertEqual(kwargs["json"]["htmlContent"], "<p>Hi</p>")

    @patch.object(email, "BREVO_API_KEY", "xkeysib-test")
    @patch("utils.email.requests.post")
    def test_send_email_network_error(self, mock_post):
        mock_post.side_effect = requests.exceptions.Timeout("timed out")

        ok, error = email.send_email("ops@example.com", "Hi", "body")

        self.assertFalse(ok)
        self.assertIn("Network error", error)

    @patch.object(email, "BREVO_API_KEY", "xkeysib-test")
    @patch("utils.email.requests.post")
    def test_send_email_api_error(self, mock_post):
        response = MagicMock(status_code=400, content=b'{"message": "bad sender"}', text="bad sender")
        response.json.return_value = {"message": "bad sender"}
        mock_post.return_value = response

        ok, error = email.send_email("ops@example.com", "Hi", "body")

        self.assertFalse(ok)
        self.assertIn("bad sender", error)

    @patch.object(email, "BREVO_API_KEY", "")
    @patch("utils.email.requests.post")
    def test_missing_api_key_skips_request(self, mock_post):
        ok, _ = email.send_email("ops@example.com", "Hi", "body")
        self.assertFalse(ok)
        mock_post.assert_not_called()

    @patch("utils.email.send_email")
    def test_lead_notification_escapes_and_replies_to_requester(self, mock_send):
        mock_send.return_value = (True, None)
        payload = {
            "name": "Jane <b>Doe</b>", "email": "jane@example.com", "phone": "555",
            "city_id": 1, "city_name": "Austin", "state_abbr": "TX", "message": None,
        }

        email.send_lead_notification_email("leads@example.com", 42, payload)

        to_email, subject, body = mock_send.call_args[0][:3]
        self.assertEqual(to_email, "leads@example.com")
        self.assertIn("#42", subject)
        self.assertIn("Austin, TX", subject)
        self.assertIn("Jane &lt;b&gt;Doe&lt;/b&gt;", body)
        self.assertEqual(mock_send.call_args.kwargs["reply_to"]["email"], "jane@example.com")


if __name__ == '__main__':
    unittest.main()
