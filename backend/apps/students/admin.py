"""Admin configuration for students app."""

from django.contrib import admin

from apps.students.models import CheckIn, Enrollment, Modality, Student
from apps.students.services import get_enrollment_status


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ["name", "organization", "phone_number", "email", "is_synthetic_name"]
    list_filter = ["organization", "is_synthetic_name"]
    search_fields = ["name", "email", "phone_number", "gympass_user_token", "totalpass_user_token"]


@admin.register(Modality)
class ModalityAdmin(admin.ModelAdmin):
    list_display = ["name", "organization", "price", "recurring_interval"]
    list_filter = ["organization"]


@admin.register(Enrollment)
class EnrollmentAdmin(admin.ModelAdmin):
    list_display = ["student", "modality", "expiry_date", "status", "price"]
    list_filter = ["modality__organization"]
    search_fields = ["student__name"]

    @admin.display(description="Status")
    def status(self, obj: Enrollment) -> str:
        return get_enrollment_status(obj.expiry_date).label


@admin.register(CheckIn)
class CheckInAdmin(admin.ModelAdmin):
    list_display = ["student", "organization", "checked_in_at", "source"]
    list_filter = ["source", "organization"]
    readonly_fields = ["checked_in_on"]
    ordering = ["-checked_in_at"]
