from django.urls import path
from .views import (
    CardDeactivateView,
    CardIssueView,
    CenterDetailView,
    CenterDonationListView,
    CenterListCreateView,
    DonationStatusUpdateView,
    DonorCardListView,
    DonorDonationListView,
    RecordDonationView,
)

urlpatterns = [
    path('donations/record', RecordDonationView.as_view(), name='donation-record'),
    path('donations/center/<str:center_id>', CenterDonationListView.as_view(), name='donation-center-list'),
    path('donations/donor/<str:donor_id>', DonorDonationListView.as_view(), name='donation-donor-list'),
    path('donations/update/<str:donation_id>', DonationStatusUpdateView.as_view(), name='donation-update'),
    path('centers', CenterListCreateView.as_view(), name='center-list'),
    path('centers/<str:center_id>', CenterDetailView.as_view(), name='center-detail'),
    path('cards', CardIssueView.as_view(), name='card-issue'),
    path('cards/donor/<str:donor_id>', DonorCardListView.as_view(), name='card-donor-list'),
    path('cards/deactivate/<str:card_id>', CardDeactivateView.as_view(), name='card-deactivate'),
]
