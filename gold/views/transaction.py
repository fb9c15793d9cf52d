import logging

from rest_framework.response import Response
from rest_framework.views import APIView

from gold.serializers import (
    PhysicalGoldTransactionSerializer,
    TransactionHistorySerializer,
)
from gold.services import PhysicalGoldTransactionService, TransactionHistoryService
from gold.views.params import int_query_param

logger = logging.getLogger(__name__)


class TransactionHistoryListView(APIView):
    """
    GET /api/transactions/ - List transaction history.

    Query params:
        - status: Filter by transaction status (SUCCESS, FAILURE)
        - type: Filter by transaction type (BUY, SELL, CONVERT_TO_PHYSICAL, TRANSFER)
        - user: Filter by user id (404 if the user doesn't exist)
    """

    def get(self, request, *args, **kwargs):
        history = TransactionHistoryService()

        user_id = int_query_param(request, "user")
        if user_id is not None:
            queryset = history.list_by_user(user_id)
        else:
            queryset = history.list_all()

        # Optional filters
        tx_status = request.query_params.get("status")
        if tx_status:
            queryset = queryset & history.list_by_status(tx_status)

        tx_type = request.query_params.get("type")
        if tx_type:
            queryset = queryset & history.list_by_type(tx_type)

        return Response(TransactionHistorySerializer(queryset, many=True).data)


class TransactionHistoryDetailView(APIView):
    """GET /api/transactions/<id>/ - Retrieve a single history record."""

    def get(self, request, history_id, *args, **kwargs):
        entry = TransactionHistoryService().get(history_id)
        return Response(TransactionHistorySerializer(entry).data)


class PhysicalGoldTransactionListView(APIView):
    """
    GET /api/physical-transactions/ - List physical delivery records.

    Query params:
        - user: Only this user's deliveries
        - branch: Only deliveries from this branch
    """

    def get(self, request, *args, **kwargs):
        physical = PhysicalGoldTransactionService()

        user_id = int_query_param(request, "user")
        branch_id = int_query_param(request, "branch")

        if user_id is not None:
            queryset = physical.list_by_user(user_id)
        else:
            queryset = physical.list_all()

        if branch_id is not None:
            queryset = queryset & physical.list_by_branch(branch_id)

        return Response(PhysicalGoldTransactionSerializer(queryset, many=True).data)
