"""
Login page and access decorator tests
"""
import pytest
from django.contrib.auth.models import AnonymousUser
from django.contrib.messages.storage.fallback import FallbackStorage
from django.http import HttpResponse
from django.test import RequestFactory
from django.urls import reverse

from accounts.decorators import staff_required


@staff_required
def dashboard_page(request):
    return HttpResponse('ok')


def browser_request(user, path='/dashboard/'):
    request = RequestFactory().get(path)
    request.user = user
    request.session = {}
    setattr(request, '_messages', FallbackStorage(request))
    return request


@pytest.mark.django_db
class TestStaffRequired:

    def test_anonymous_browser_is_sent_to_login(self):
        response = dashboard_page(browser_request(AnonymousUser()))

        assert response.status_code == 302
        assert response['Location'].startswith(reverse('accounts:login'))
        assert 'next=/dashboard/' in response['Location']

    def test_non_staff_browser_is_sent_home(self, django_user_model):
        user = django_user_model.objects.create_user(username='viewer', password='x')

        response = dashboard_page(browser_request(user))

        assert response.status_code == 302
        assert response['Location'] == reverse('clinics:verify_page')

    def test_staff_passes(self, staff_user):
        assert dashboard_page(browser_request(staff_user)).content == b'ok'

    def test_json_caller_gets_envelope(self):
        request = RequestFactory().get('/dashboard/', HTTP_ACCEPT='application/json')
        request.user = AnonymousUser()

        response = dashboard_page(request)

        assert response.status_code == 401


@pytest.mark.django_db
def test_login_page_renders(client):
    response = client.get(reverse('accounts:login'))

    assert response.status_code == 200
    assert b'Admin Login' in response.content


@pytest.mark.django_db
def test_dashboard_responses_are_not_cached(admin_client, clinic):
    response = admin_client.get(reverse('clinics_api:clinic_list'))

    assert 'no-store' in response['Cache-Control']
    assert response['Pragma'] == 'no-cache'
