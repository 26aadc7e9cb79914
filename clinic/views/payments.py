"""
Billing endpoints.

Staff who may read billing see every payment; a patient sees only their
own. Status changes are staff only; any payment status may follow any
other.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic import access
from clinic.models import Payment
from clinic.serializers.billing import PaymentSerializer, PaymentStatusSerializer
from clinic.services.inflight import inflight_guard
from clinic.services.scoping import ScreenContext
from clinic.views.common import apply_filters, get_record, list_params, paginate, record_change

SEARCH_FIELDS = ('patient__name', 'payment_method', 'description')


def _payments():
    return Payment.objects.select_related('patient')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def payments(request):
    ctx = ScreenContext.for_request(request, access.PAYMENTS)
    if request.method == 'POST':
        ctx.require(access.CREATE)
        with inflight_guard(request.user, access.PAYMENTS, request.data):
            s = PaymentSerializer(data=request.data)
            s.is_valid(raise_exception=True)
            payment = s.save()
        record_change(request, access.PAYMENTS, 'create', payment,
                      detail={'patient_id': payment.patient_id, 'amount': str(payment.amount)})
        return Response({'ok': True, 'data': PaymentSerializer(payment).data}, status=201)

    params = list_params(request)
    qs = apply_filters(ctx.queryset(_payments()), params, SEARCH_FIELDS)
    rows, pagination = paginate(qs, params)
    return Response(ctx.payload(PaymentSerializer(rows, many=True).data, pagination=pagination))


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated])
def payment_detail(request, pk: int):
    ctx = ScreenContext.for_request(request, access.PAYMENTS)
    if request.method == 'GET':
        payment = get_record(_payments(), pk)
        ctx.require(access.READ, payment)
        return Response({'ok': True, 'data': PaymentSerializer(payment).data})

    ctx.require(access.DELETE)
    payment = get_record(_payments(), pk)
    payment.delete()
    record_change(request, access.PAYMENTS, 'delete', obj_id=pk)
    return Response({'ok': True})


@api_view(['PUT', 'POST'])
@permission_classes([IsAuthenticated])
def payment_status(request, pk: int):
    ctx = ScreenContext.for_request(request, access.PAYMENTS)
    ctx.require(access.STATUS)
    s = PaymentStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    payment = get_record(_payments(), pk)
    previous = payment.payment_status
    payment.payment_status = s.validated_data['payment_status']
    payment.save(update_fields=['payment_status', 'updated_at'])
    record_change(request, access.PAYMENTS, 'status', payment,
                  detail={'from': previous, 'to': payment.payment_status})
    return Response({'ok': True, 'data': PaymentSerializer(payment).data})
