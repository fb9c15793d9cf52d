import logging

from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from gold.serializers import (
    ConvertToPhysicalSerializer,
    VirtualGoldHoldingInputSerializer,
    VirtualGoldHoldingSerializer,
)
from gold.services import VirtualGoldHoldingService
from gold.views.params import int_query_param

logger = logging.getLogger(__name__)


class VirtualGoldHoldingListCreateView(APIView):
    """
    GET  /api/holdings/ - List holdings.
    POST /api/holdings/ - Create a holding.

    Query params:
        - user: Only holdings of this user (404 if the user doesn't exist)
        - vendor: Together with user, only holdings at this vendor's branches
    """

    def get(self, request, *args, **kwargs):
        service = VirtualGoldHoldingService()
        user_id = int_query_param(request, "user")
        vendor_id = int_query_param(request, "vendor")

        if vendor_id is not None and user_id is None:
            raise ValidationError({"vendor": "The vendor filter requires a user."})

        if user_id is None:
            holdings = service.list_holdings()
        elif vendor_id is None:
            holdings = service.list_by_user(user_id)
        else:
            holdings = service.list_by_user_and_vendor(user_id, vendor_id)

        return Response(VirtualGoldHoldingSerializer(holdings, many=True).data)

    def post(self, request, *args, **kwargs):
        serializer = VirtualGoldHoldingInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        ack = VirtualGoldHoldingService().create_holding(**serializer.validated_data)
        return Response(ack.as_dict(), status=status.HTTP_201_CREATED)


class VirtualGoldHoldingDetailView(APIView):
    """
    GET /api/holdings/<id>/ - Retrieve a holding.
    PUT /api/holdings/<id>/ - Overwrite user, branch and quantity.
    """

    def get(self, request, holding_id, *args, **kwargs):
        holding = VirtualGoldHoldingService().get_holding(holding_id)
        return Response(VirtualGoldHoldingSerializer(holding).data)

    def put(self, request, holding_id, *args, **kwargs):
        serializer = VirtualGoldHoldingInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        ack = VirtualGoldHoldingService().update_holding(
            holding_id, **serializer.validated_data
        )
        return Response(ack.as_dict(), status=status.HTTP_200_OK)


class ConvertToPhysicalView(APIView):
    """
    POST /api/holdings/<id>/convert/ - Convert virtual gold to physical.

    Request body: {"quantity": <positive decimal, at most the holding balance>}
    """

    def post(self, request, holding_id, *args, **kwargs):
        serializer = ConvertToPhysicalSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        ack = VirtualGoldHoldingService().convert_to_physical(
            holding_id, serializer.validated_data["quantity"]
        )
        return Response(ack.as_dict(), status=status.HTTP_200_OK)
