"""
Payload validation for position create, replace and patch.
"""

from __future__ import annotations

from datetime import timezone as dt_timezone

from django import forms
from django.core.exceptions import NON_FIELD_ERRORS
from django.db import models

from apps.positions.models import Position


class PositionForm(forms.ModelForm):
    """
    Validates a full position payload against the model's field constraints.

    Fields missing from the payload become null, so binding a payload to an
    existing instance is a full replace.
    """

    class Meta:
        model = Position
        exclude = ["position_import"]

    def clean(self):
        cleaned_data = super().clean()
        for field in Position._meta.concrete_fields:
            if not isinstance(field, models.DateTimeField):
                continue
            value = cleaned_data.get(field.name)
            # Positions store zone-less timestamps
            if value is not None and value.tzinfo is not None:
                cleaned_data[field.name] = value.astimezone(dt_timezone.utc).replace(
                    tzinfo=None
                )
        return cleaned_data


def form_errors(form: forms.BaseForm) -> str:
    """Flatten form errors into ``field: message; field: message``."""
    parts = []
    for field_name, messages in form.errors.items():
        label = "payload" if field_name == NON_FIELD_ERRORS else field_name
        parts.append(f"{label}: {' '.join(messages)}")
    return "; ".join(parts)
