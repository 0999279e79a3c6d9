"""Staff account and audit trail admin."""

from django import forms
from django.contrib import admin

from users.models import AuditLog, CustomUser


class StaffUserCreationForm(forms.ModelForm):
    """Staff account creation form; the password is hashed on save."""

    password = forms.CharField(label="Initial password", widget=forms.PasswordInput, min_length=6)

    class Meta:
        model = CustomUser
        fields = ["email", "first_name", "last_name", "role", "is_active", "is_staff"]

    def clean_email(self):
        email = self.cleaned_data["email"].strip().lower()
        if CustomUser.objects.filter(email=email).exists():
            raise forms.ValidationError("This email is already registered")
        return email

    def save(self, commit=True):
        user = super().save(commit=False)
        user.set_password(self.cleaned_data["password"])
        if commit:
            user.save()
        return user


@admin.register(CustomUser)
class StaffUserAdmin(admin.ModelAdmin):
    list_display = ("email", "display_name", "role", "is_active", "last_login")
    list_filter = ("role", "is_active")
    search_fields = ("email", "first_name", "last_name")
    ordering = ("email",)
    readonly_fields = ("last_login", "created_at", "updated_at")
    exclude = ("password", "groups", "user_permissions")

    def get_form(self, request, obj=None, **kwargs):
        if obj is None:
            kwargs["form"] = StaffUserCreationForm
            kwargs["exclude"] = None
        return super().get_form(request, obj, **kwargs)

    def get_fieldsets(self, request, obj=None):
        if obj is None:
            return [(None, {"fields": StaffUserCreationForm.Meta.fields + ["password"]})]
        return super().get_fieldsets(request, obj)


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("created_at", "user", "action", "table_name", "record_id", "ip_address")
    list_filter = ("action", "table_name")
    search_fields = ("path", "record_id", "user__email")
    readonly_fields = [field.name for field in AuditLog._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
