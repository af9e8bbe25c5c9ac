import re

from rest_framework import serializers

PHONE_PATTERN = re.compile(r'^[\+]?[1-9][\d]{0,15}$')


def validate_phone_number(value):
    """International-style phone: optional +, no leading zero, 10 to 20 characters"""
    if value in (None, ''):
        return value
    cleaned = value.replace(' ', '').replace('-', '')
    if len(value) < 10 or len(value) > 20:
        raise serializers.ValidationError('Phone number must be between 10 and 20 characters')
    if not PHONE_PATTERN.match(cleaned):
        raise serializers.ValidationError('Invalid phone number format')
    return value
