"""
Doctor views.

Creating a doctor also creates its DOCTOR login; deleting one removes
both.  Hospital admins manage the doctors of their own hospital only.
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinical.identity import get_identity
from clinical.models import Doctor
from clinical.permissions import DoctorGate, enforce
from clinical.policy import Action, Ownership, Resource, Role, check_context, check_ownership
from clinical.serializers.common import ScopeQuerySerializer
from clinical.serializers.doctor import DoctorCreateSerializer, DoctorSerializer, DoctorUpdateSerializer
from clinical.services import doctors as doctor_service
from clinical.services.accounts import get_hospital_or_404
from clinical.services.scoping import load_scoped, scoped_list


def _doctors():
    return Doctor.objects.select_related('hospital')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, DoctorGate])
def doctors(request):
    identity = get_identity(request)
    if request.method == 'POST':
        s = DoctorCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        vd = s.validated_data
        enforce(check_context(identity))

        hospital_id = vd.get('hospitalId')
        if identity.role is not Role.SUPER_ADMIN:
            hospital_id = hospital_id or identity.hospital_id
        if not hospital_id:
            raise ValidationError({'hospitalId': ['Hospital ID is required']})
        enforce(check_ownership(identity, Action.CREATE, Resource.DOCTOR, Ownership(hospital_id=hospital_id)))

        doctor = doctor_service.create_doctor(
            hospital=get_hospital_or_404(hospital_id),
            name=vd['name'],
            email=vd['email'],
            password=vd['password'],
            specialization=vd['specialization'],
            actor=request.user,
        )
        return Response({'success': True, 'data': DoctorSerializer(doctor).data}, status=status.HTTP_201_CREATED)

    q = ScopeQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = scoped_list(identity, Resource.DOCTOR, _doctors().order_by('-created_at'), q.validated_data)
    data = DoctorSerializer(qs, many=True).data
    return Response({'success': True, 'count': len(data), 'data': data})


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, DoctorGate])
def doctor_detail(request, pk):
    identity = get_identity(request)
    if request.method == 'GET':
        doctor = load_scoped(identity, Action.READ, Resource.DOCTOR, _doctors(), pk)
        return Response({'success': True, 'data': DoctorSerializer(doctor).data})

    if request.method == 'PUT':
        doctor = load_scoped(identity, Action.UPDATE, Resource.DOCTOR, _doctors(), pk)
        s = DoctorUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        doctor = doctor_service.update_doctor(
            doctor, name=s.validated_data.get('name'), specialization=s.validated_data.get('specialization')
        )
        return Response({'success': True, 'data': DoctorSerializer(doctor).data})

    doctor = load_scoped(identity, Action.DELETE, Resource.DOCTOR, _doctors(), pk)
    doctor_service.delete_doctor(doctor, actor=request.user)
    return Response({'success': True, 'data': {}})
