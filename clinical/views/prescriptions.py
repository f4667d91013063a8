from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinical.identity import get_identity
from clinical.models import Prescription
from clinical.permissions import PrescriptionGate
from clinical.policy import Action, Resource
from clinical.serializers.common import ScopeQuerySerializer
from clinical.serializers.prescription import (
    PrescriptionCreateSerializer,
    PrescriptionSerializer,
    PrescriptionUpdateSerializer,
)
from clinical.services import prescriptions as prescription_service
from clinical.services.scoping import load_scoped, scoped_list


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, PrescriptionGate])
def prescriptions(request):
    """List prescriptions in scope (``?patientId=`` narrows) or prescribe."""
    identity = get_identity(request)
    if request.method == 'POST':
        s = PrescriptionCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        vd = s.validated_data
        prescription = prescription_service.create_prescription(
            identity,
            actor=request.user,
            patient_enrollment_id=vd['patientEnrollmentId'],
            medication=vd['medication'],
            dosage=vd['dosage'],
            instructions=vd['instructions'],
            doctor_id=vd.get('doctorId'),
        )
        return Response({'success': True, 'data': PrescriptionSerializer(prescription).data},
                        status=status.HTTP_201_CREATED)

    q = ScopeQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = scoped_list(identity, Resource.PRESCRIPTION, Prescription.objects.order_by('-created_at'),
                     q.validated_data)
    data = PrescriptionSerializer(qs, many=True).data
    return Response({'success': True, 'count': len(data), 'data': data})


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, PrescriptionGate])
def prescription_detail(request, pk):
    identity = get_identity(request)
    qs = Prescription.objects.all()
    if request.method == 'GET':
        prescription = load_scoped(identity, Action.READ, Resource.PRESCRIPTION, qs, pk)
        return Response({'success': True, 'data': PrescriptionSerializer(prescription).data})

    if request.method == 'PUT':
        prescription = load_scoped(identity, Action.UPDATE, Resource.PRESCRIPTION, qs, pk)
        s = PrescriptionUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        prescription = prescription_service.update_prescription(prescription, **s.validated_data)
        return Response({'success': True, 'data': PrescriptionSerializer(prescription).data})

    prescription = load_scoped(identity, Action.DELETE, Resource.PRESCRIPTION, qs, pk)
    prescription_service.delete_prescription(prescription, actor=request.user)
    return Response({'success': True, 'data': {}})
