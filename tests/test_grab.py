"""
Etlaq Test Suite: Studio grab proxy (/api/grab)
===============================================

Usage:
    python -m pytest tests/test_grab.py -v
"""
import unittest
from unittest import mock

import requests

from fakes import UnitTestConfig, FakeResponse
from etlaq import create_app


class StudioConfig(UnitTestConfig):
    STUDIO_CHAT_ID = 'chat-42'


class ProductionConfig(StudioConfig):
    ENVIRONMENT = 'production'


class GrabTestCase(unittest.TestCase):
    config = StudioConfig

    def setUp(self):
        self.client = create_app(self.config).test_client()
        patcher = mock.patch('etlaq.services.grab_service.requests.post')
        self.post = patcher.start()
        self.addCleanup(patcher.stop)

    def grab(self, body=None):
        return self.client.post('/api/grab', json=body if body is not None else {
            'prompt': 'Make the button blue', 'context': {'componentName': 'Button'}
        })


class TestGrabProxy(GrabTestCase):

    def test_forwards_chat_id_and_relays_stream(self):
        self.post.return_value = FakeResponse(chunks=[b'data: {"step":1}\n\n', b'data: {"step":2}\n\n'])
        response = self.grab()
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.content_type.startswith('text/event-stream'))
        self.assertEqual(response.data, b'data: {"step":1}\n\ndata: {"step":2}\n\n')

        args, kwargs = self.post.call_args
        self.assertEqual(args[0], 'https://studio.test/api/grab')
        self.assertEqual(kwargs['json'], {
            'chatId': 'chat-42',
            'context': {'componentName': 'Button'},
            'prompt': 'Make the button blue',
        })

    def test_studio_error_keeps_status(self):
        self.post.return_value = FakeResponse(status_code=404, text='chat not found')
        response = self.grab()
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json(), {'error': 'Studio request failed', 'details': 'chat not found'})

    def test_transport_failure(self):
        self.post.side_effect = requests.ConnectionError('refused')
        response = self.grab()
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.get_json()['error'], 'Proxy error')


class TestGrabUnconfigured(GrabTestCase):
    config = UnitTestConfig

    def test_missing_chat_id(self):
        response = self.grab()
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.get_json()['error'], 'React-grab integration not configured')
        self.post.assert_not_called()


class TestGrabOutsideDevelopment(GrabTestCase):
    config = ProductionConfig

    def test_forbidden(self):
        response = self.grab()
        self.assertEqual(response.status_code, 403)
        self.post.assert_not_called()


if __name__ == '__main__':
    unittest.main()
