import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from gold.serializers import (
    PaymentInputSerializer,
    PaymentSerializer,
    PaymentStatusSerializer,
)
from gold.services import PaymentService
from gold.views.params import int_query_param

logger = logging.getLogger(__name__)


class PaymentListCreateView(APIView):
    """
    GET  /api/payments/ - List payments.
    POST /api/payments/ - Record a payment (status defaults to PENDING).

    Query params (combinable):
        - user: Only this user's payments (404 if the user doesn't exist)
        - status: PENDING, SUCCESS, FAILED
        - method: CREDIT_CARD, DEBIT_CARD, NET_BANKING, UPI, WALLET
    """

    def get(self, request, *args, **kwargs):
        payments = PaymentService()

        user_id = int_query_param(request, "user")
        if user_id is not None:
            queryset = payments.list_by_user(user_id)
        else:
            queryset = payments.list_all()

        payment_status = request.query_params.get("status")
        if payment_status:
            queryset = queryset & payments.list_by_status(payment_status)

        payment_method = request.query_params.get("method")
        if payment_method:
            queryset = queryset & payments.list_by_method(payment_method)

        return Response(PaymentSerializer(queryset, many=True).data)

    def post(self, request, *args, **kwargs):
        serializer = PaymentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        ack = PaymentService().record_payment(**serializer.validated_data)
        return Response(ack.as_dict(), status=status.HTTP_201_CREATED)


class PaymentDetailView(APIView):
    """
    GET   /api/payments/<id>/ - Retrieve a payment.
    PATCH /api/payments/<id>/ - Change its status.
    """

    def get(self, request, payment_id, *args, **kwargs):
        payment = PaymentService().get(payment_id)
        return Response(PaymentSerializer(payment).data)

    def patch(self, request, payment_id, *args, **kwargs):
        serializer = PaymentStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        ack = PaymentService().update_status(
            payment_id, serializer.validated_data["payment_status"]
        )
        return Response(ack.as_dict(), status=status.HTTP_200_OK)
