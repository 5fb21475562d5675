from io import StringIO

import pytest
from django.core.management import call_command
from django.test import override_settings

from dental.models import TreatmentPricing, User

pytestmark = pytest.mark.django_db


def test_ensure_staff_users_is_idempotent():
    call_command('ensure_staff_users', stdout=StringIO())
    call_command('ensure_staff_users', '--password', 'N3w#Pass', stdout=StringIO())
    assert User.objects.count() == 7
    admin = User.objects.get(username='admin1')
    assert admin.role == User.ROLE_ADMIN
    assert admin.is_staff
    assert admin.check_password('N3w#Pass')


def test_seed_treatment_pricing():
    out = StringIO()
    call_command('seed_treatment_pricing', stdout=out)
    assert '34 created' in out.getvalue()
    assert TreatmentPricing.objects.get(name='Crown (PFM)', insurance_provider='JUBILEE').base_price == 405000
    assert TreatmentPricing.objects.get(name='Crown (PFM)', insurance_provider='GA').smart_item_code == 'DENT050'
    assert not TreatmentPricing.objects.filter(name='Teeth Whitening', insurance_provider='GA').exists()

    out = StringIO()
    call_command('seed_treatment_pricing', stdout=out)
    assert '0 created, 34 updated' in out.getvalue()


@override_settings(JUBILEE_USERNAME='', SMART_BASE_URL='')
def test_refresh_insurer_cache_without_credentials(monkeypatch):
    from channels.layers import get_channel_layer

    sent = []

    async def fake_group_send(group, event):
        sent.append((group, event))

    monkeypatch.setattr(get_channel_layer(), 'group_send', fake_group_send)
    out = StringIO()
    call_command('refresh_insurer_cache', stdout=out)
    assert 'not configured' in out.getvalue()
    group, event = sent[-1]
    assert group == 'notifications'
    assert event['type'] == 'broadcast.refresh'
    assert [k for k in event['keys'] if k.startswith('dashboard:')]
