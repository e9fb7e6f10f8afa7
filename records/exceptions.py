from rest_framework.exceptions import PermissionDenied
from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.response import Response


class AccountNotApproved(PermissionDenied):
    """Valid credentials on an account an administrator has not approved."""
    default_detail = 'account is awaiting administrator approval'
    default_code = 'account_not_approved'


def _message(data):
    # DRF puts the text under 'detail'; serializer errors are field -> [messages]
    if isinstance(data, dict):
        if 'detail' in data:
            return str(data['detail'])
        parts = []
        for field, errors in data.items():
            if isinstance(errors, (list, tuple)):
                errors = '; '.join(str(e) for e in errors)
            parts.append(f"{field}: {errors}" if field != 'non_field_errors' else str(errors))
        return ' | '.join(parts)
    if isinstance(data, (list, tuple)):
        return '; '.join(str(e) for e in data)
    return str(data)


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': str(exc)}}, status=500)
    code = getattr(exc, 'default_code', None) or 'api_error'
    body = {'ok': False, 'error': {'code': code, 'message': _message(resp.data)}}
    if isinstance(resp.data, dict) and 'detail' not in resp.data:
        body['error']['fields'] = resp.data
    resp.data = body
    return resp
