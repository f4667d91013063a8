from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinical.identity import get_identity
from clinical.models import Hospital
from clinical.permissions import HospitalGate
from clinical.policy import Action, Resource
from clinical.serializers.common import ScopeQuerySerializer
from clinical.serializers.hospital import HospitalSerializer
from clinical.services import hospitals as hospital_service
from clinical.services.scoping import load_scoped, scoped_list


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, HospitalGate])
def hospitals(request):
    identity = get_identity(request)
    if request.method == 'POST':
        s = HospitalSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        hospital = hospital_service.create_hospital(actor=request.user, **s.validated_data)
        return Response({'success': True, 'data': HospitalSerializer(hospital).data}, status=status.HTTP_201_CREATED)

    q = ScopeQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = scoped_list(identity, Resource.HOSPITAL, Hospital.objects.order_by('-created_at'), q.validated_data)
    data = HospitalSerializer(qs, many=True).data
    return Response({'success': True, 'count': len(data), 'data': data})


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, HospitalGate])
def hospital_detail(request, pk):
    identity = get_identity(request)
    if request.method == 'GET':
        hospital = load_scoped(identity, Action.READ, Resource.HOSPITAL, Hospital.objects.all(), pk)
        return Response({'success': True, 'data': HospitalSerializer(hospital).data})

    if request.method == 'PUT':
        hospital = load_scoped(identity, Action.UPDATE, Resource.HOSPITAL, Hospital.objects.all(), pk)
        s = HospitalSerializer(hospital, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        hospital = hospital_service.update_hospital(hospital, actor=request.user, **s.validated_data)
        return Response({'success': True, 'data': HospitalSerializer(hospital).data})

    hospital = load_scoped(identity, Action.DELETE, Resource.HOSPITAL, Hospital.objects.all(), pk)
    hospital_service.delete_hospital(hospital, actor=request.user)
    return Response({'success': True, 'data': {}})
