"""
URL table for the REST API.

Paths have no trailing slash (``APPEND_SLASH`` is off) to match the
browser client.  Literal segments such as ``unread-count`` are listed
before the ``<int:pk>`` routes that share their prefix.
"""
from django.urls import path

from .auth_views import login_view, logout_view, register_view
from .views import appointments, beds, billing, clinical, engagement, notifications, people, staff, users
from .views.health import healthz

urlpatterns = [
    path('healthz', healthz, name='healthz'),

    # users / auth
    path('api/users/register', register_view, name='register'),
    path('api/users/login', login_view, name='login'),
    path('api/users/logout', logout_view, name='logout'),
    path('api/users/profile', users.profile, name='profile'),
    path('api/users/profile/upload-picture', users.upload_picture, name='upload_picture'),

    # people
    path('api/patients', people.patients, name='patients'),
    path('api/patients/<int:pk>', people.patient_detail, name='patient_detail'),
    path('api/doctors', people.doctors, name='doctors'),
    path('api/doctors/<int:pk>', people.doctor_detail, name='doctor_detail'),

    # appointments
    path('api/appointments', appointments.appointments, name='appointments'),
    path('api/appointments/<int:pk>', appointments.appointment_detail, name='appointment_detail'),

    # billing & pharmacy
    path('api/invoices', billing.invoices, name='invoices'),
    path('api/invoices/<int:pk>/pay', billing.invoice_pay, name='invoice_pay'),
    path('api/medicines', billing.medicines, name='medicines'),
    path('api/medicines/alerts', billing.medicine_alerts, name='medicine_alerts'),
    path('api/medicines/<int:pk>', billing.medicine_detail, name='medicine_detail'),

    # clinical records
    path('api/prescriptions', clinical.prescriptions, name='prescriptions'),
    path('api/lab-reports', clinical.lab_reports, name='lab_reports'),
    path('api/lab-reports/<int:pk>', clinical.lab_report_detail, name='lab_report_detail'),
    path('api/medical-history', clinical.medical_history, name='medical_history'),
    path('api/medical-history/<int:pk>', clinical.medical_history_detail, name='medical_history_detail'),

    # beds
    path('api/beds', beds.beds, name='beds'),
    path('api/beds/<int:pk>', beds.bed_detail, name='bed_detail'),
    path('api/beds/<int:pk>/assign', beds.bed_assign, name='bed_assign'),
    path('api/beds/<int:pk>/discharge', beds.bed_discharge, name='bed_discharge'),

    # notifications
    path('api/notifications', notifications.notifications, name='notifications'),
    path('api/notifications/unread-count', notifications.unread_count, name='notifications_unread_count'),
    path('api/notifications/read-all', notifications.read_all, name='notifications_read_all'),
    path('api/notifications/<int:pk>/read', notifications.mark_read, name='notification_read'),
    path('api/notifications/<int:pk>', notifications.notification_detail, name='notification_detail'),

    # staff
    path('api/activity-logs', staff.activity_logs, name='activity_logs'),
    path('api/activity-logs/my', staff.my_activity, name='my_activity'),
    path('api/attendance', staff.all_attendance, name='attendance'),
    path('api/attendance/check-in', staff.check_in, name='check_in'),
    path('api/attendance/check-out', staff.check_out, name='check_out'),
    path('api/attendance/my', staff.my_attendance, name='my_attendance'),
    path('api/attendance/today', staff.today_attendance, name='today_attendance'),
    path('api/leaves', staff.leave_requests, name='leaves'),
    path('api/leaves/my', staff.my_leaves, name='my_leaves'),
    path('api/leaves/<int:pk>/status', staff.leave_status, name='leave_status'),

    # reviews
    path('api/reviews', engagement.create_review, name='reviews'),
    path('api/reviews/ratings', engagement.doctor_ratings, name='review_ratings'),
    path('api/reviews/doctor/<int:doctor_id>', engagement.doctor_reviews, name='doctor_reviews'),
    path('api/reviews/check/<int:appointment_id>', engagement.review_check, name='review_check'),

    # chat
    path('api/chat/users', engagement.chat_users, name='chat_users'),
    path('api/chat/send', engagement.chat_send, name='chat_send'),
    path('api/chat/read/<int:sender_id>', engagement.chat_mark_read, name='chat_mark_read'),
    path('api/chat/<int:user_id>', engagement.chat_conversation, name='chat_conversation'),

    # search
    path('api/search', engagement.search, name='search'),
]
