from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from records.models import User
from .common import AliasMixin, CleanCharField, RequiredOnCreateMixin, optional_text

# roles a person may ask for when registering; oversight roles are granted by an admin
SELF_REGISTER_ROLES = [(role, label) for role, label in User.ROLE_CHOICES if role in ('doctor', 'staff')]


class UserSerializer(serializers.Serializer):
    username = CleanCharField(max_length=150, required=False)
    password = serializers.CharField(required=False, write_only=True)
    firstName = optional_text(150, source='first_name')
    lastName = optional_text(150, source='last_name')
    email = serializers.EmailField(required=False, allow_blank=True)
    phone = optional_text(32)
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES, required=False)
    facilityId = serializers.IntegerField(required=False, allow_null=True)
    isActive = serializers.BooleanField(required=False, source='is_active')

    def validate_username(self, v):
        qs = User.objects.filter(username__iexact=v)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError('username already taken')
        return v

    def validate(self, attrs):
        if self.instance is None:
            missing = [k for k in ('username', 'password') if not attrs.get(k)]
            if missing:
                raise serializers.ValidationError(f"Missing required fields: {', '.join(missing)}")
        password = attrs.get('password')
        if password:
            try:
                validate_password(password, user=self.instance)
            except DjangoValidationError as e:
                raise serializers.ValidationError({'password': e.messages})
        return attrs


class RegisterSerializer(AliasMixin, RequiredOnCreateMixin, serializers.Serializer):
    ALIASES = {
        'first_name': 'firstName',
        'last_name': 'lastName',
        'phoneNumber': 'phone',
        'phone_number': 'phone',
        'password_confirmation': 'confirmPassword',
        'passwordConfirmation': 'confirmPassword',
        'roleId': 'role',
        'facility_id': 'facilityId',
    }
    REQUIRED_ON_CREATE = (
        ('username', 'username'),
        ('firstName', 'first_name'),
        ('lastName', 'last_name'),
        ('email', 'email'),
        ('facilityId', 'facilityId'),
        ('password', 'password'),
        ('confirmPassword', 'confirmPassword'),
    )

    username = serializers.RegexField(r'^[a-zA-Z0-9._-]{3,30}$', required=False,
                                      error_messages={'invalid': '3 to 30 letters, digits or ._-'})
    firstName = optional_text(150, source='first_name')
    lastName = optional_text(150, source='last_name')
    email = serializers.EmailField(required=False, allow_blank=True)
    phone = optional_text(32)
    role = serializers.ChoiceField(choices=SELF_REGISTER_ROLES, required=False, default='staff')
    facilityId = serializers.IntegerField(required=False, allow_null=True)
    password = serializers.CharField(required=False, write_only=True)
    confirmPassword = serializers.CharField(required=False, write_only=True)

    def validate_username(self, v):
        if User.objects.filter(username__iexact=v).exists():
            raise serializers.ValidationError('username already taken')
        return v

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if attrs['password'] != attrs.pop('confirmPassword'):
            raise serializers.ValidationError({'confirmPassword': ['passwords do not match']})
        candidate = User(username=attrs['username'], email=attrs['email'],
                         first_name=attrs['first_name'], last_name=attrs['last_name'])
        try:
            validate_password(attrs['password'], user=candidate)
        except DjangoValidationError as e:
            raise serializers.ValidationError({'password': e.messages})
        return attrs


class RejectSerializer(serializers.Serializer):
    reason = optional_text(255)


class RoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES)


class ProfileSerializer(serializers.Serializer):
    firstName = optional_text(150, source='first_name')
    lastName = optional_text(150, source='last_name')
    email = serializers.EmailField(required=False, allow_blank=True)
    phone = optional_text(32)


class AuditLogQuerySerializer(serializers.Serializer):
    action = serializers.CharField(required=False)
    objectType = serializers.CharField(required=False)
    userId = serializers.IntegerField(required=False)
    dateFrom = serializers.DateField(required=False)
    dateTo = serializers.DateField(required=False)
