"""
Django admin registrations.

Lets superusers inspect and correct records at ``/admin/``.  Only light
configuration is applied; the REST API remains the primary interface.
"""
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import (
    ActivityLog,
    Appointment,
    Attendance,
    Bed,
    Invoice,
    LabReport,
    Leave,
    MedicalHistory,
    Medicine,
    Message,
    Notification,
    Prescription,
    Review,
    User,
)


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('email', 'first_name', 'last_name', 'role', 'is_active', 'is_staff')
    list_filter = ('role', 'is_active', 'is_staff')
    search_fields = ('email', 'first_name', 'last_name')
    ordering = ('email',)
    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Profile', {'fields': ('first_name', 'last_name', 'role', 'gender', 'phone', 'date_of_birth',
                                'doctor_department', 'profile_image')}),
        ('Permissions', {'fields': ('is_active', 'is_staff', 'is_superuser')}),
    )
    add_fieldsets = (
        (None, {'classes': ('wide',), 'fields': ('email', 'role', 'password1', 'password2')}),
    )


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'doctor', 'appointment_date', 'status')
    list_filter = ('status',)


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'invoice_type', 'total', 'status', 'created_at')
    list_filter = ('invoice_type', 'status')


@admin.register(Medicine)
class MedicineAdmin(admin.ModelAdmin):
    list_display = ('name', 'category', 'stock', 'price', 'expiry_date')
    search_fields = ('name', 'category', 'supplier')


@admin.register(Bed)
class BedAdmin(admin.ModelAdmin):
    list_display = ('room_number', 'bed_number', 'ward', 'status', 'patient', 'daily_rate')
    list_filter = ('ward', 'status')


@admin.register(ActivityLog)
class ActivityLogAdmin(admin.ModelAdmin):
    list_display = ('created_at', 'user', 'action', 'entity', 'entity_id')
    list_filter = ('action', 'entity')
    readonly_fields = [f.name for f in ActivityLog._meta.fields]


@admin.register(Attendance)
class AttendanceAdmin(admin.ModelAdmin):
    list_display = ('user', 'date', 'status', 'hours_worked')
    list_filter = ('status',)


@admin.register(Leave)
class LeaveAdmin(admin.ModelAdmin):
    list_display = ('user', 'leave_type', 'start_date', 'end_date', 'status')
    list_filter = ('status', 'leave_type')


admin.site.register(Prescription)
admin.site.register(LabReport)
admin.site.register(MedicalHistory)
admin.site.register(Notification)
admin.site.register(Message)
admin.site.register(Review)
