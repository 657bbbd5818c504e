"""Tests for Crisis Service HTTP handler."""
import json

import pytest
from unittest.mock import patch

from mindwatch.shared.utils import configure_pii_salt


@pytest.fixture(autouse=True)
def setup_pii_salt():
    """Configure PII salt before each test."""
    configure_pii_salt("test_salt_that_is_at_least_32_characters_long")


@pytest.fixture
def client():
    """Create Flask test client."""
    from mindwatch.services.crisis_service.handler import app
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client


class TestHealthEndpoint:
    def test_health_returns_200(self, client):
        response = client.get('/health')
        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['status'] == 'healthy'
        assert data['service'] == 'crisis-service'
        assert 'keyword_version' in data

    def test_ready_returns_200(self, client):
        response = client.get('/ready')
        assert response.status_code == 200
        assert json.loads(response.data)['status'] == 'ready'


class TestDetectEndpoint:
    def test_detect_safe_message(self, client):
        response = client.post(
            '/detect',
            json={'text': 'I had a good day', 'user_id': 'user_123', 'source': 'chat'},
        )

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['severity'] == 'none'
        assert data['isCrisis'] is False
        assert data['resources'] is None
        assert data['stressLevel'] == 0

    def test_detect_stress_message(self, client):
        response = client.post(
            '/detect',
            json={'text': "I'm so stressed and overwhelmed and anxious"},
        )

        data = json.loads(response.data)
        assert data['severity'] == 'moderate'
        assert data['isStress'] is True
        assert data['stressLevel'] == 5

    def test_detect_crisis_message_includes_resources(self, client):
        response = client.post(
            '/detect',
            json={'text': 'I want to end my life', 'user_id': 'user_123'},
        )

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['isCrisis'] is True
        assert data['severity'] == 'high'
        assert data['detectedKeywords'] == ['end my life']
        assert len(data['resources']['hotlines']) == 4

    def test_empty_text_is_valid(self, client):
        response = client.post('/detect', json={'text': ''})

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['severity'] == 'none'
        assert data['stressLevel'] == 0

    def test_missing_text_returns_400(self, client):
        response = client.post('/detect', json={'user_id': 'user_123'})
        assert response.status_code == 400

    def test_non_string_text_returns_400(self, client):
        response = client.post('/detect', json={'text': 42})
        assert response.status_code == 400

    def test_missing_body_returns_400(self, client):
        response = client.post('/detect')
        assert response.status_code == 400

    def test_array_body_returns_400(self, client):
        response = client.post('/detect', json=['I want to end my life'])
        assert response.status_code == 400

    @patch('mindwatch.services.crisis_service.handler.classifier')
    def test_classifier_error_returns_resources(self, mock_classifier, client):
        """Errors never fail open: resources are still returned."""
        mock_classifier.assess.side_effect = RuntimeError("boom")

        response = client.post('/detect', json={'text': 'anything'})

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['severity'] == 'low'
        assert data['resources'] is not None
        assert 'error' in data


class TestStressLevelEndpoint:
    def test_stress_level(self, client):
        response = client.post('/stress-level', json={'text': 'panic and burnout'})

        assert response.status_code == 200
        assert json.loads(response.data)['stressLevel'] == 3

    def test_stress_level_missing_text(self, client):
        response = client.post('/stress-level', json={})
        assert response.status_code == 400

    def test_stress_level_array_body(self, client):
        response = client.post('/stress-level', json=['panic'])
        assert response.status_code == 400


class TestResourcesEndpoint:
    def test_resources(self, client):
        response = client.get('/resources')

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['message'].startswith("You're not alone")
