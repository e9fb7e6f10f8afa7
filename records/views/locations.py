from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.services import locations


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def states(request):
    return Response({'ok': True, 'data': locations.states()})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def lgas(request):
    state = request.query_params.get('state') or ''
    return Response({'ok': True, 'data': {
        'state': state,
        'capital': locations.capital(state),
        'lgas': locations.lgas(state),
    }})
