import datetime

import bleach
from rest_framework import serializers


def clean_text(v):
    return bleach.clean((v or '').strip(), strip=True)


class CleanCharField(serializers.CharField):
    """CharField whose value is stripped of markup."""

    def to_internal_value(self, data):
        return clean_text(super().to_internal_value(data))


def optional_text(max_length=None, **kwargs):
    kwargs.setdefault('required', False)
    kwargs.setdefault('allow_blank', True)
    if max_length:
        kwargs['max_length'] = max_length
    return CleanCharField(**kwargs)


class AliasMixin:
    """Accept alternative (usually snake_case) keys for camelCase fields."""
    ALIASES: dict = {}

    def to_internal_value(self, data):
        if self.ALIASES and hasattr(data, 'keys'):
            data = {k: data[k] for k in data.keys()}
            for alias, name in self.ALIASES.items():
                if alias in data and name not in data:
                    data[name] = data.pop(alias)
        return super().to_internal_value(data)


class RequiredOnCreateMixin:
    """Report every missing required field at once, on create only.

    ``REQUIRED_ON_CREATE`` pairs the API name with the validated_data key.
    """
    REQUIRED_ON_CREATE: tuple = ()

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if self.instance is None:
            missing = [api for api, key in self.REQUIRED_ON_CREATE if attrs.get(key) in (None, '')]
            if missing:
                raise serializers.ValidationError(f"Missing required fields: {', '.join(missing)}")
        return attrs


def not_in_future(value, label='date'):
    if value and value > datetime.date.today():
        raise serializers.ValidationError(f'{label} cannot be in the future')
    return value


def current_value(serializer, attrs, key):
    """Value after the update: the incoming one, else the stored one."""
    if key in attrs:
        return attrs[key]
    return getattr(serializer.instance, key, None)
