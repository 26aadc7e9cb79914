"""
Dashboard endpoint.

Staff get hospital-wide figures, minus any figure drawn from a resource
their role cannot read. Patients get figures computed from their own
rows; an unlinked patient gets the ``profile_not_found`` state and no
figures.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic import access
from clinic.services.dashboard import hospital_stats, patient_stats
from clinic.services.scoping import ScreenContext


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_stats(request):
    ctx = ScreenContext.for_request(request, access.DASHBOARD)
    if ctx.own_only(access.READ):
        stats = patient_stats(ctx.patient_id)
    else:
        stats = hospital_stats(ctx.role)
    return Response(ctx.payload(stats, role=ctx.role))
