"""
Client for the SMART (GA Insurance) API.

SMART uses an OAuth password grant.  The front desk drives it through a
small set of named actions (see :data:`ACTIONS`); ``smart_request`` is a
pass-through restricted to the SMART paths listed in
:data:`ALLOWED_PATHS`.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional
from urllib.parse import quote

import requests
from django.conf import settings

from dental.exceptions import InsurerConfigError, InsurerError
from dental.models import InsurerToken
from dental.services.insurance import tokens

logger = logging.getLogger(__name__)

PROVIDER = InsurerToken.PROVIDER_SMART

DEFAULT_PAYER_CODE = 'GA'
DEFAULT_PROVIDER_CODE = 'SD_DENTAL'
DEFAULT_SP_ID = '1'

ALLOWED_PATHS = (
    '/api/visit',
    '/api/diagnosis',
    '/api/final-claim',
    '/api/interim-claim',
    '/api/admission',
    '/api/discharge',
    '/api/claims',
    '/api/member',
    '/api/benefits',
)


def is_allowed_path(path: Any) -> bool:
    return isinstance(path, str) and any(path.startswith(p) for p in ALLOWED_PATHS)


def _url(path: str) -> str:
    return f"{settings.SMART_BASE_URL}{'' if path.startswith('/') else '/'}{path}"


def _fetch_token():
    if not (settings.SMART_BASE_URL and settings.SMART_CLIENT_ID and settings.SMART_CLIENT_SECRET
            and settings.SMART_USERNAME and settings.SMART_PASSWORD):
        raise InsurerConfigError("SMART API credentials are missing. Configure the SMART_* settings.")
    try:
        r = requests.post(
            _url('/oauth/token'),
            data={
                'grant_type': 'password',
                'client_id': settings.SMART_CLIENT_ID,
                'client_secret': settings.SMART_CLIENT_SECRET,
                'username': settings.SMART_USERNAME,
                'password': settings.SMART_PASSWORD,
            },
            timeout=settings.INSURER_TIMEOUT,
        )
    except requests.RequestException as e:
        logger.error("SMART token request failed", exc_info=True)
        raise InsurerError(f"SMART token error: {e}") from e
    if not r.ok:
        raise InsurerError(f"SMART token error: {r.status_code} {r.text}")
    try:
        data = r.json()
        return data['access_token'], data.get('token_type') or 'Bearer', int(data.get('expires_in') or 3600)
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        logger.error("SMART token response unreadable: %s", r.text[:200])
        raise InsurerError("SMART token error: unexpected token response") from e


def _call(method: str, path: str, *, params: Optional[dict] = None, body: Any = None) -> Any:
    tok = tokens.get_valid_token(PROVIDER, _fetch_token)
    headers = {'Authorization': f"{tok.token_type} {tok.access_token}"}
    kwargs: Dict[str, Any] = {'params': params, 'headers': headers, 'timeout': settings.INSURER_TIMEOUT}
    if method == 'POST':
        kwargs['json'] = body if body is not None else {}
    try:
        r = requests.request(method, _url(path), **kwargs)
    except requests.RequestException as e:
        logger.error("SMART %s %s failed", method, path, exc_info=True)
        raise InsurerError(f"SMART API {method} {path} failed: {e}") from e
    if not r.ok:
        logger.error("SMART %s %s returned HTTP %s", method, path, r.status_code)
        raise InsurerError(f"SMART API {method} {path} failed: {r.status_code} {r.text}")
    return r.json()


def refresh_token() -> tokens.TokenInfo:
    return tokens.get_valid_token(PROVIDER, _fetch_token, force=True)


def get_json(path: str, params: Optional[dict] = None) -> Any:
    return _call('GET', path, params=params)


def post_json(path: str, body: Any, params: Optional[dict] = None) -> Any:
    return _call('POST', path, params=params, body=body)


def with_payer_defaults(body: dict) -> dict:
    body = dict(body)
    body.setdefault('payer_code', DEFAULT_PAYER_CODE)
    body.setdefault('provider_code', DEFAULT_PROVIDER_CODE)
    body.setdefault('sp_id', DEFAULT_SP_ID)
    return body


def _require(payload: dict, *names: str) -> None:
    missing = [n for n in names if not payload.get(n)]
    if missing:
        raise ValueError(f"{' and '.join(missing)} {'is' if len(missing) == 1 else 'are'} required")


def _session_id_from(visit: Any) -> Optional[str]:
    if not isinstance(visit, dict):
        return None
    data = visit.get('data') if isinstance(visit.get('data'), dict) else {}
    return visit.get('sessionId') or data.get('sessionId') or visit.get('id')


# ---------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------
def get_token(payload: dict) -> dict:
    tok = tokens.get_valid_token(PROVIDER, _fetch_token)
    return {'ok': True, 'expiresAt': tok.expires_at_ms}


def verify_member(payload: dict) -> dict:
    _require(payload, 'patientNumber')
    patient_number = payload['patientNumber']
    session_id = payload.get('sessionId')
    if not session_id:
        try:
            visit = get_json('/api/visit', {'patientNumber': patient_number, 'sessionStatus': 'PENDING'})
            session_id = _session_id_from(visit)
        except InsurerError:
            logger.info("no pending SMART visit for %s", patient_number)

    params = {'patientNumber': patient_number, 'sessionId': session_id}
    member = get_json('/api/member', params)
    benefits = None
    try:
        benefits = get_json('/api/benefits', params)
    except InsurerError:
        logger.info("SMART benefits unavailable for %s", patient_number)

    return {
        'ok': True,
        'member': member,
        'benefits': benefits,
        'coverageInfo': {'dentalCoverage': True},
        'sessionId': session_id,
    }


def get_benefits(payload: dict) -> dict:
    _require(payload, 'patientNumber')
    data = get_json('/api/benefits', {'patientNumber': payload['patientNumber'], 'sessionId': payload.get('sessionId')})
    return {'ok': True, 'data': data}


def get_session(payload: dict) -> dict:
    _require(payload, 'patientNumber')
    data = get_json('/api/visit', {
        'patientNumber': payload['patientNumber'],
        'sessionStatus': payload.get('sessionStatus') or 'PENDING',
    })
    return {'ok': True, 'data': data}


def link_session(payload: dict) -> dict:
    _require(payload, 'visitNumber', 'sessionId')
    data = post_json('/api/visit/link', {'visit_number': payload['visitNumber'], 'session_id': payload['sessionId']})
    return {'ok': True, 'data': data}


def _post_body(path: str, key: str, label: str, defaults: bool) -> Callable[[dict], dict]:
    def action(payload: dict) -> dict:
        body = payload.get(key)
        if not isinstance(body, dict) or not body:
            raise ValueError(f"{label} body is required")
        if defaults:
            body = with_payer_defaults(body)
        return {'ok': True, 'data': post_json(path, body)}
    action.__name__ = f"post_{key}"
    return action


post_diagnosis = _post_body('/api/diagnosis', 'diagnosis', 'diagnosis', defaults=True)
submit_final_claim = _post_body('/api/final-claim', 'claim', 'claim', defaults=True)
submit_interim_claim = _post_body('/api/interim-claim', 'claim', 'claim', defaults=True)
submit_admission = _post_body('/api/admission', 'admission', 'admission', defaults=False)
submit_discharge = _post_body('/api/discharge', 'discharge', 'discharge', defaults=False)


def claim_status(payload: dict) -> dict:
    _require(payload, 'claimId')
    data = get_json(f"/api/claims/{quote(str(payload['claimId']), safe='')}/status")
    return {'ok': True, 'data': data}


def smart_request(payload: dict) -> dict:
    method = str(payload.get('method') or 'GET').upper()
    path = payload.get('path')
    if not is_allowed_path(path):
        raise ValueError("Invalid or disallowed path")
    params = payload.get('params')
    if method == 'POST':
        data = post_json(path, payload.get('body'), params)
    else:
        data = get_json(path, params)
    return {'ok': True, 'data': data}


ACTIONS: Dict[str, Callable[[dict], dict]] = {
    'get_token': get_token,
    'verify_member': verify_member,
    'get_benefits': get_benefits,
    'get_session': get_session,
    'link_session': link_session,
    'post_diagnosis': post_diagnosis,
    'submit_final_claim': submit_final_claim,
    'submit_interim_claim': submit_interim_claim,
    'submit_admission': submit_admission,
    'submit_discharge': submit_discharge,
    'claim_status': claim_status,
    'smart_request': smart_request,
}


def dispatch(action: Optional[str], payload: dict) -> dict:
    handler = ACTIONS.get(action or '')
    if handler is None:
        raise ValueError("Unknown action")
    return handler(payload)
