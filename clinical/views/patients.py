"""
Patient enrollment views.

Lists are narrowed to the caller's hospital (admins) or to the caller's
own patients (doctors); single records are looked up first and then
checked against the caller, so an unknown id is always a 404.
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinical.identity import get_identity
from clinical.models import PatientEnrollment
from clinical.permissions import PatientGate
from clinical.policy import Action, Resource
from clinical.serializers.common import ScopeQuerySerializer
from clinical.serializers.patient import PatientCreateSerializer, PatientSerializer, PatientUpdateSerializer
from clinical.services import patients as patient_service
from clinical.services.scoping import load_scoped, scoped_list


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, PatientGate])
def patients(request):
    identity = get_identity(request)
    if request.method == 'POST':
        s = PatientCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        vd = s.validated_data
        patient = patient_service.create_patient(
            identity,
            actor=request.user,
            name=vd['name'],
            age=vd['age'],
            gender=vd['gender'],
            doctor_id=vd.get('doctorId'),
            hospital_id=vd.get('hospitalId'),
            date_of_admission=vd.get('dateOfAdmission'),
        )
        return Response({'success': True, 'data': PatientSerializer(patient).data}, status=status.HTTP_201_CREATED)

    q = ScopeQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = scoped_list(identity, Resource.PATIENT, PatientEnrollment.objects.order_by('-created_at'), q.validated_data)
    data = PatientSerializer(qs, many=True).data
    return Response({'success': True, 'count': len(data), 'data': data})


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, PatientGate])
def patient_detail(request, pk):
    identity = get_identity(request)
    qs = PatientEnrollment.objects.all()
    if request.method == 'GET':
        patient = load_scoped(identity, Action.READ, Resource.PATIENT, qs, pk)
        return Response({'success': True, 'data': PatientSerializer(patient).data})

    if request.method == 'PUT':
        patient = load_scoped(identity, Action.UPDATE, Resource.PATIENT, qs, pk)
        s = PatientUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        vd = s.validated_data
        patient = patient_service.update_patient(
            patient,
            name=vd.get('name'),
            age=vd.get('age'),
            gender=vd.get('gender'),
            date_of_admission=vd.get('dateOfAdmission'),
        )
        return Response({'success': True, 'data': PatientSerializer(patient).data})

    patient = load_scoped(identity, Action.DELETE, Resource.PATIENT, qs, pk)
    patient_service.delete_patient(patient, actor=request.user)
    return Response({'success': True, 'data': {}})
