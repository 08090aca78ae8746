from django.http import JsonResponse
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from .auth import KIND_CENTER, CanAccessDonor, IsBloodCenter, issue_token
from .intake import get_adapter
from .serializers import (
    serialize_card,
    serialize_center,
    serialize_center_donations,
    serialize_donation_recorded,
    serialize_donor_donations,
    serialize_status_updated,
)
from .services import (
    deactivate_donor_card,
    get_blood_center,
    issue_donor_card,
    list_blood_centers,
    list_center_donations,
    list_donor_cards,
    list_donor_donations,
    record_donation,
    register_blood_center,
    update_blood_center,
    update_donation_status,
)

TRUE_VALUES = ('1', 'true', 'yes')


# ── Donations ─────────────────────────────────────────────────────────────

class RecordDonationView(APIView):
    """POST /api/donations/record - Record a donation at the authenticated center"""

    permission_classes = [IsBloodCenter]

    def post(self, request):
        data = get_adapter('record_donation', request.body).process()
        donation = record_donation(data, request.user.center)
        return JsonResponse(serialize_donation_recorded(donation), status=201)


class CenterDonationListView(APIView):
    """GET /api/donations/center/<centerId> - Donations received by a center"""

    permission_classes = [IsBloodCenter]

    def get(self, request, center_id):
        donations = list_center_donations(center_id)
        return JsonResponse(serialize_center_donations(donations), safe=False)


class DonorDonationListView(APIView):
    """GET /api/donations/donor/<donorId> - A donor's donation history"""

    permission_classes = [CanAccessDonor]

    def get(self, request, donor_id):
        donations = list_donor_donations(donor_id)
        return JsonResponse(serialize_donor_donations(donations), safe=False)


class DonationStatusUpdateView(APIView):
    """PUT /api/donations/update/<donationId> - Change status / medical notes"""

    permission_classes = [IsBloodCenter]

    def put(self, request, donation_id):
        data = get_adapter('status_update', request.body).process()
        donation = update_donation_status(donation_id, request.user.center, data)
        return JsonResponse(serialize_status_updated(donation))


# ── Blood centers ─────────────────────────────────────────────────────────

class CenterListCreateView(APIView):
    """
    GET  /api/centers - Active centers (?bloodGroup=O-&includeInactive=true)
    POST /api/centers - Register a center, returns its access token
    """

    permission_classes = [AllowAny]

    def get(self, request):
        include_inactive = request.query_params.get('includeInactive', '').lower() in TRUE_VALUES
        blood_group = request.query_params.get('bloodGroup') or None
        centers = list_blood_centers(include_inactive=include_inactive, blood_group=blood_group)
        return JsonResponse([serialize_center(c) for c in centers], safe=False)

    def post(self, request):
        data = get_adapter('blood_center', request.body).process()
        center = register_blood_center(data)
        return JsonResponse({
            'message': 'Blood center registered successfully',
            'center': serialize_center(center),
            'token': issue_token(KIND_CENTER, center.center_id),
        }, status=201)


class CenterDetailView(APIView):
    """
    GET   /api/centers/<centerId> - Public center profile
    PATCH /api/centers/<centerId> - Center updates its own profile
    """

    def get_permissions(self):
        if self.request.method == 'PATCH':
            return [IsBloodCenter()]
        return [AllowAny()]

    def get(self, request, center_id):
        return JsonResponse(serialize_center(get_blood_center(center_id)))

    def patch(self, request, center_id):
        data = get_adapter('center_update', request.body).process()
        center = update_blood_center(center_id, request.user.center, data)
        return JsonResponse({
            'message': 'Blood center updated successfully',
            'center': serialize_center(center),
        })


# ── Donor ID cards ────────────────────────────────────────────────────────

class CardIssueView(APIView):
    """POST /api/cards - Issue a donor ID card"""

    permission_classes = [IsBloodCenter]

    def post(self, request):
        data = get_adapter('donor_card', request.body).process()
        card = issue_donor_card(data)
        return JsonResponse({
            'message': 'Donor card issued successfully',
            'card': serialize_card(card),
        }, status=201)


class DonorCardListView(APIView):
    """GET /api/cards/donor/<donorId> - A donor's cards, newest first"""

    permission_classes = [CanAccessDonor]

    def get(self, request, donor_id):
        cards = list_donor_cards(donor_id)
        return JsonResponse([serialize_card(c) for c in cards], safe=False)


class CardDeactivateView(APIView):
    """PUT /api/cards/deactivate/<cardId> - Deactivate a card"""

    permission_classes = [IsBloodCenter]

    def put(self, request, card_id):
        card = deactivate_donor_card(card_id)
        return JsonResponse({
            'message': 'Donor card deactivated successfully',
            'card': serialize_card(card),
        })
