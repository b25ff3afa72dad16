"""
Tests for the aging trigger endpoint.
"""

from unittest import mock

import pytest
from django.db import DatabaseError
from django.urls import reverse

from stockwatch.models import Alert, HealthStatus


pytestmark = pytest.mark.django_db

AUTH = {'HTTP_AUTHORIZATION': 'Bearer test-secret'}


@pytest.fixture
def url():
    return reverse('stockwatch:update-aging')


class TestUpdateAgingView:
    """Tests for POST/GET cron/update-aging/."""

    def test_post_runs_reclassification(self, client, url, make_batch):
        batch = make_batch(95)

        response = client.post(url, **AUTH)

        assert response.status_code == 200
        assert response.json() == {
            'totalProcessed': 1,
            'updated': 1,
            'alertsGenerated': 1,
            'failed': [],
        }
        batch.refresh_from_db()
        assert batch.status == HealthStatus.DEAD
        assert Alert.objects.count() == 1

    def test_wrong_secret(self, client, url, make_batch):
        """Bad bearer token: 401 and nothing runs."""
        batch = make_batch(95)

        response = client.post(url, HTTP_AUTHORIZATION='Bearer nope')

        assert response.status_code == 401
        assert response.json() == {'error': 'Unauthorized'}
        batch.refresh_from_db()
        assert batch.status == HealthStatus.HEALTHY

    def test_missing_header(self, client, url):
        response = client.post(url)

        assert response.status_code == 401

    def test_not_configured(self, client, url, settings, monkeypatch):
        """No secret configured: 500, even with a header."""
        settings.STOCKWATCH = {}
        monkeypatch.delenv('STOCKWATCH_CRON_SECRET', raising=False)

        response = client.post(url, **AUTH)

        assert response.status_code == 500
        assert response.json() == {'error': 'Cron job not configured'}

    def test_run_failure_returns_json(self, client, url):
        """A run that fails as a whole answers 500 with a JSON error."""
        with mock.patch(
            'stockwatch.views.reclassify',
            side_effect=DatabaseError('connection refused'),
        ):
            response = client.post(url, **AUTH)

        assert response.status_code == 500
        assert response.json() == {
            'error': 'Failed to update aging',
            'details': 'connection refused',
        }

    def test_get_describes_usage(self, client, url):
        response = client.get(url, **AUTH)

        assert response.status_code == 200
        assert response.json()['method'] == 'POST'
        assert response.json()['endpoint'] == url

    def test_get_requires_auth(self, client, url):
        response = client.get(url)

        assert response.status_code == 401

    def test_other_methods_not_allowed(self, client, url):
        response = client.put(url, **AUTH)

        assert response.status_code == 405
