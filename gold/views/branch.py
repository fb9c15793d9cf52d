import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from gold.serializers import (
    BranchTransferSerializer,
    TransactionHistorySerializer,
    VendorBranchInputSerializer,
    VendorBranchSerializer,
)
from gold.services import VendorBranchService
from gold.views.params import int_query_param

logger = logging.getLogger(__name__)


class VendorBranchListCreateView(APIView):
    """
    GET  /api/branches/ - List branches.
    POST /api/branches/ - Create a branch.

    Query params (combinable):
        - vendor: Vendor id
        - city, state, country: Case-insensitive address match
    """

    def get(self, request, *args, **kwargs):
        branches = VendorBranchService().list_branches(
            vendor_id=int_query_param(request, "vendor"),
            city=request.query_params.get("city"),
            state=request.query_params.get("state"),
            country=request.query_params.get("country"),
        )
        return Response(VendorBranchSerializer(branches, many=True).data)

    def post(self, request, *args, **kwargs):
        serializer = VendorBranchInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        ack = VendorBranchService().create_branch(**serializer.validated_data)
        return Response(ack.as_dict(), status=status.HTTP_201_CREATED)


class VendorBranchDetailView(APIView):
    """
    GET /api/branches/<id>/ - Retrieve a branch.
    PUT /api/branches/<id>/ - Overwrite vendor, address and quantity.
    """

    def get(self, request, branch_id, *args, **kwargs):
        branch = VendorBranchService().get_branch(branch_id)
        return Response(VendorBranchSerializer(branch).data)

    def put(self, request, branch_id, *args, **kwargs):
        serializer = VendorBranchInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        ack = VendorBranchService().update_branch(branch_id, **serializer.validated_data)
        return Response(ack.as_dict(), status=status.HTTP_200_OK)


class VendorBranchTransferView(APIView):
    """
    POST /api/branches/transfer/ - Move gold between two branches.

    Request body: {"source_branch_id": <id>, "destination_branch_id": <id>,
    "quantity": <positive decimal>}
    """

    def post(self, request, *args, **kwargs):
        serializer = BranchTransferSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        ack = VendorBranchService().transfer(**serializer.validated_data)
        return Response(ack.as_dict(), status=status.HTTP_200_OK)


class VendorBranchTransactionsView(APIView):
    """GET /api/branches/<id>/transactions/ - History recorded against a branch."""

    def get(self, request, branch_id, *args, **kwargs):
        entries = VendorBranchService().list_transactions(branch_id)
        return Response(TransactionHistorySerializer(entries, many=True).data)
