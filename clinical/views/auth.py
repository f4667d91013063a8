"""
Authentication views.

``register`` and ``login`` are public and answer with a signed bearer
token plus the public view of the account; ``me`` echoes the caller.
Failed logins never reveal whether the email exists.
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from clinical.authentication import issue_token
from clinical.permissions import HospitalAdminGate
from clinical.serializers.auth import (
    HospitalAdminCreateSerializer,
    LoginSerializer,
    PublicUserSerializer,
    RegisterSerializer,
)
from clinical.services import accounts


def _token_payload(user):
    return {'success': True, 'token': issue_token(user), 'user': PublicUserSerializer(user).data}


@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    user = accounts.register(
        name=vd['name'],
        email=vd['email'],
        password=vd['password'],
        role=vd['role'],
        hospital_id=vd.get('hospitalId'),
        specialization=(vd.get('specialization') or '').strip() or None,
    )
    return Response(_token_payload(user), status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user = accounts.login(request, email=s.validated_data['email'], password=s.validated_data['password'])
    return Response(_token_payload(user))

# ScopedRateThrottle reads throttle_scope from the view class
login.cls.throttle_scope = 'login'


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me(request):
    return Response({'success': True, 'data': PublicUserSerializer(request.user).data})


@api_view(['POST'])
@permission_classes([IsAuthenticated, HospitalAdminGate])
def create_hospital_admin(request):
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
    return Response({'success': True, 'data': PublicUserSerializer(admin).data}, status=status.HTTP_201_CREATED)
