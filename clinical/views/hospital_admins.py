"""
Hospital admin management (SUPER_ADMIN) and the admin's own dashboard.
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinical.identity import get_identity
from clinical.permissions import HospitalAdminGate, IsHospitalAdmin
from clinical.serializers.auth import (
    HospitalAdminCreateSerializer,
    HospitalAdminUpdateSerializer,
    PublicUserSerializer,
)
from clinical.serializers.doctor import DoctorSerializer
from clinical.serializers.hospital import HospitalSerializer
from clinical.serializers.patient import RecentPatientSerializer
from clinical.services import accounts
from clinical.services.hospitals import hospital_statistics


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, HospitalAdminGate])
def hospital_admins(request):
    if request.method == 'POST':
        s = HospitalAdminCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        vd = s.validated_data
        admin = accounts.create_hospital_admin(
            actor=request.user,
            name=vd['name'],
            email=vd['email'],
            password=vd['password'],
            hospital_id=vd['hospitalId'],
        )
        return Response({'success': True, 'data': PublicUserSerializer(admin).data},
                        status=status.HTTP_201_CREATED)

    data = PublicUserSerializer(accounts.hospital_admins().order_by('-date_joined'), many=True).data
    return Response({'success': True, 'count': len(data), 'data': data})


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, HospitalAdminGate])
def hospital_admin_detail(request, pk):
    admin = accounts.get_hospital_admin_or_404(pk)
    if request.method == 'GET':
        return Response({'success': True, 'data': PublicUserSerializer(admin).data})

    if request.method == 'PUT':
        s = HospitalAdminUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        vd = s.validated_data
        admin = accounts.update_hospital_admin(
            admin,
            actor=request.user,
            name=vd.get('name'),
            email=vd.get('email'),
            hospital_id=vd.get('hospitalId'),
        )
        return Response({'success': True, 'data': PublicUserSerializer(admin).data})

    accounts.delete_hospital_admin(admin, actor=request.user)
    return Response({'success': True, 'data': {}})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsHospitalAdmin])
def my_hospital(request):
    """The admin's hospital with counts and its newest doctors and patients."""
    identity = get_identity(request)
    if not identity.hospital_id:
        raise ValidationError('No hospital assigned to this admin')
    hospital = accounts.get_hospital_or_404(identity.hospital_id)
    stats = hospital_statistics(hospital)
    return Response({
        'success': True,
        'data': {
            'hospital': HospitalSerializer(hospital).data,
            'statistics': stats['statistics'],
            'recentDoctors': DoctorSerializer(stats['recentDoctors'], many=True).data,
            'recentPatients': RecentPatientSerializer(stats['recentPatients'], many=True).data,
        },
    })
