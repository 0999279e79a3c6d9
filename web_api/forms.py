"""
Request validation for the JSON API.

Create forms require the mandatory fields; ``*UpdateForm`` variants make every
field optional and the view only applies the keys the client sent.
"""

from django import forms

from core.models import choices as event_choices
from inventory.choices import DeviceStatus, SimProvider
from monitoring.choices import ContactType, IssueType, Severity
from users import choices as user_choices


def _optional(form_class, non_blank=()):
    """
    Subclass of ``form_class`` with every field optional.

    A key left out of the payload means "unchanged", but a key sent as
    ``null`` or ``""`` is rejected for fields that are required on create and
    for the extra ``non_blank`` names.
    """

    class PartialForm(form_class):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            self.non_blank_fields = set(non_blank)
            for name, field in self.fields.items():
                if field.required:
                    self.non_blank_fields.add(name)
                field.required = False

        def clean(self):
            cleaned = super().clean()
            for name in self.non_blank_fields:
                if name in self.data and name in cleaned and cleaned[name] in (None, ""):
                    self.add_error(name, forms.Field.default_error_messages["required"])
            return cleaned

    PartialForm.__name__ = form_class.__name__.replace("Form", "UpdateForm")
    return PartialForm


class LoginForm(forms.Form):
    email = forms.EmailField()
    password = forms.CharField(min_length=6)


class PatientForm(forms.Form):
    patient_code = forms.CharField(max_length=20)
    name = forms.CharField(max_length=100, required=False)
    gender = forms.ChoiceField(choices=user_choices.Gender.choices, required=False)
    age = forms.IntegerField(min_value=18, max_value=100)
    affected_hand = forms.ChoiceField(choices=user_choices.AffectedHand.choices)
    group_type = forms.ChoiceField(choices=user_choices.GroupType.choices)
    vcg_assignment = forms.ChoiceField(choices=user_choices.VcgAssignment.choices, required=False)
    a0_date = forms.DateField(required=False)
    study_start_date = forms.DateField()
    enrollment_date = forms.DateField()
    phone_number = forms.CharField(max_length=20, required=False)

    def clean_patient_code(self):
        return self.cleaned_data["patient_code"].strip()

    def clean(self):
        cleaned = super().clean()
        if cleaned.get("vcg_assignment") and cleaned.get("group_type") == user_choices.GroupType.INTERVENTION:
            self.add_error("vcg_assignment", "VCG assignment applies to the control group only.")
        return cleaned


PatientUpdateForm = _optional(PatientForm)


class DropoutForm(forms.Form):
    dropout_date = forms.DateField()
    dropout_reason = forms.CharField()
    dropout_reason_type = forms.CharField(max_length=50)


class EventUpdateForm(forms.Form):
    status = forms.ChoiceField(choices=event_choices.EventStatus.choices)
    completion_date = forms.DateField(required=False)
    notes = forms.CharField(required=False)


class DeviceSetForm(forms.Form):
    set_number = forms.IntegerField(min_value=1, required=False)
    mars_device_id = forms.CharField(max_length=50)
    pluto_device_id = forms.CharField(max_length=50)
    laptop_number = forms.CharField(max_length=50, required=False)
    modem_serial = forms.CharField(max_length=50, required=False)
    notes = forms.CharField(required=False)


class DeviceSetUpdateForm(_optional(DeviceSetForm, non_blank=("set_number",))):
    status = forms.ChoiceField(choices=DeviceStatus.choices, required=False)


class DeviceAssignForm(forms.Form):
    patient_id = forms.IntegerField(min_value=1)
    expected_return_date = forms.DateTimeField(required=False)


class WatchForm(forms.Form):
    name = forms.CharField(max_length=50)
    left_serial = forms.CharField(max_length=50)
    right_serial = forms.CharField(max_length=50)
    is_backup = forms.BooleanField(required=False)


WatchUpdateForm = _optional(WatchForm)


class WatchAssignForm(forms.Form):
    patient_id = forms.IntegerField(min_value=1)


class SimForm(forms.Form):
    sim_number = forms.CharField(max_length=30)
    provider = forms.ChoiceField(choices=SimProvider.choices)
    modem_number = forms.CharField(max_length=50, required=False)
    linked_device_set_id = forms.IntegerField(min_value=1, required=False)


SimUpdateForm = _optional(SimForm)


class SimRechargeForm(forms.Form):
    recharge_date = forms.DateField()
    duration_days = forms.IntegerField(min_value=1)


class BaseSessionForm(forms.Form):
    patient_id = forms.IntegerField(min_value=1)
    session_date = forms.DateField()
    study_day = forms.IntegerField(min_value=0)
    duration_minutes = forms.IntegerField(min_value=0, required=False)
    adl_training_given = forms.CharField(required=False)
    patient_feedback = forms.CharField(required=False)
    therapist_notes = forms.CharField(required=False)


class InterventionSessionForm(BaseSessionForm):
    robotic_assessment_score = forms.FloatField(required=False)
    exercises_performed = forms.CharField(required=False)
    mechanisms_used = forms.CharField(required=False)
    device_performance_notes = forms.CharField(required=False)


class ControlSessionForm(BaseSessionForm):
    manual_exercises_given = forms.CharField(required=False)


InterventionSessionUpdateForm = _optional(InterventionSessionForm)
ControlSessionUpdateForm = _optional(ControlSessionForm)


class AdverseEventForm(forms.Form):
    patient_id = forms.IntegerField(min_value=1)
    event_date = forms.DateField()
    study_day = forms.IntegerField(min_value=0)
    event_type = forms.CharField(max_length=100)
    severity = forms.ChoiceField(choices=Severity.choices)
    description = forms.CharField(required=False)
    action_taken = forms.CharField(required=False)
    reported_to_pi = forms.BooleanField(required=False)
    requires_dropout = forms.BooleanField(required=False)


class AdverseEventUpdateForm(_optional(AdverseEventForm)):
    """``requires_dropout`` only acts on creation; the patient cannot be moved."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields.pop("patient_id")
        self.fields.pop("requires_dropout")


class IssueLogForm(forms.Form):
    patient_id = forms.IntegerField(min_value=1)
    contact_date = forms.DateField()
    contact_type = forms.ChoiceField(choices=ContactType.choices)
    duration_minutes = forms.IntegerField(min_value=0, required=False)
    issue_type = forms.ChoiceField(choices=IssueType.choices)
    issue_description = forms.CharField(required=False)
    root_cause = forms.CharField(required=False)
    solution_provided = forms.CharField(required=False)
    follow_up_required = forms.BooleanField(required=False)
    follow_up_date = forms.DateField(required=False)


class IssueLogUpdateForm(_optional(IssueLogForm)):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields.pop("patient_id")


class ExerciseForm(forms.Form):
    patient_id = forms.IntegerField(min_value=1)
    group_type = forms.ChoiceField(choices=user_choices.GroupType.choices)
    study_day = forms.IntegerField(min_value=0)
    mars_mechanisms = forms.CharField(required=False)
    pluto_mechanisms = forms.CharField(required=False)
    control_exercises = forms.CharField(required=False)
    adl_notes = forms.CharField(required=False)
    notes = forms.CharField(required=False)


class ImportForm(forms.Form):
    mode = forms.ChoiceField(choices=(("merge", "Merge"), ("replace", "Replace")), required=False)

    def clean_mode(self):
        return self.cleaned_data.get("mode") or "merge"
