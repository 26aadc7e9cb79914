from __future__ import annotations

from django.db.models import ProtectedError
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic import access
from clinic.models import Medicine
from clinic.serializers.pharmacy import MedicineSerializer
from clinic.services.inflight import inflight_guard
from clinic.services.scoping import ScreenContext
from clinic.views.common import apply_filters, get_record, list_params, paginate, record_change

SEARCH_FIELDS = ('name', 'manufacturer', 'category')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def medicines(request):
    ctx = ScreenContext.for_request(request, access.MEDICINES)
    if request.method == 'POST':
        ctx.require(access.CREATE)
        with inflight_guard(request.user, access.MEDICINES, request.data):
            s = MedicineSerializer(data=request.data)
            s.is_valid(raise_exception=True)
            medicine = s.save()
        record_change(request, access.MEDICINES, 'create', medicine)
        return Response({'ok': True, 'data': MedicineSerializer(medicine).data}, status=201)

    params = list_params(request)
    qs = apply_filters(ctx.queryset(Medicine.objects.all()), params, SEARCH_FIELDS)
    rows, pagination = paginate(qs, params)
    return Response(ctx.payload(MedicineSerializer(rows, many=True).data, pagination=pagination))


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def medicine_detail(request, pk: int):
    ctx = ScreenContext.for_request(request, access.MEDICINES)
    if request.method == 'GET':
        return Response({'ok': True, 'data': MedicineSerializer(get_record(Medicine.objects.all(), pk)).data})

    if request.method == 'DELETE':
        ctx.require(access.DELETE)
        medicine = get_record(Medicine.objects.all(), pk)
        try:
            medicine.delete()
        except ProtectedError:
            raise ValidationError({'medicine': ['This medicine is referenced by prescriptions and cannot be deleted.']})
        record_change(request, access.MEDICINES, 'delete', obj_id=pk)
        return Response({'ok': True})

    ctx.require(access.UPDATE)
    medicine = get_record(Medicine.objects.all(), pk)
    s = MedicineSerializer(medicine, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    medicine = s.save()
    record_change(request, access.MEDICINES, 'update', medicine, detail={'fields': sorted(s.validated_data)})
    return Response({'ok': True, 'data': MedicineSerializer(medicine).data})
