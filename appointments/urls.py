"""
URL routing for the booking API.
"""

from django.urls import path
from .views import (
    AppointmentDetailView,
    AppointmentRescheduleView,
    AppointmentTransitionView,
    ProfessionalAppointmentsView,
    SlotListView,
)

urlpatterns = [
    path('professionals/<int:professional_id>/slots/', SlotListView.as_view(), name='slot-list'),
    path(
        'professionals/<int:professional_id>/appointments/',
        ProfessionalAppointmentsView.as_view(),
        name='professional-appointments',
    ),
    path('appointments/<int:pk>/', AppointmentDetailView.as_view(), name='appointment-detail'),
    path(
        'appointments/<int:pk>/confirm/',
        AppointmentTransitionView.as_view(operation='confirm'),
        name='appointment-confirm',
    ),
    path(
        'appointments/<int:pk>/cancel/',
        AppointmentTransitionView.as_view(operation='cancel'),
        name='appointment-cancel',
    ),
    path(
        'appointments/<int:pk>/complete/',
        AppointmentTransitionView.as_view(operation='mark_completed'),
        name='appointment-complete',
    ),
    path(
        'appointments/<int:pk>/no-show/',
        AppointmentTransitionView.as_view(operation='mark_no_show'),
        name='appointment-no-show',
    ),
    path(
        'appointments/<int:pk>/reschedule/',
        AppointmentRescheduleView.as_view(),
        name='appointment-reschedule',
    ),
]
