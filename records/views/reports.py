from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.permissions import IsClinicalRole
from records.services import reports as svc


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def general_report(request):
    return Response({'ok': True, 'data': svc.general_report(request.user)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def export_report(request):
    """CSV export of one module, honouring that module's list filters."""
    fmt = (request.query_params.get('format') or 'csv').lower()
    if fmt != 'csv':
        raise ValidationError({'format': ['only csv exports are supported']})
    module = (request.query_params.get('module') or '').strip()
    return svc.export_csv(request.user, module, request.query_params)
