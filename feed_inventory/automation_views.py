"""
Feed Automation API Views

Scheduler status and manual job triggers.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from .services import FeedAutomationScheduler, UnknownJobError

logger = logging.getLogger(__name__)


class AutomationStatusView(APIView):
    """
    GET /api/automation/status - Registered jobs with schedule, next and last run
    """

    def get(self, request):
        return Response({
            'success': True,
            'data': FeedAutomationScheduler().get_status(),
        })


class AutomationTriggerView(APIView):
    """
    POST /api/automation/trigger - Run a job now

    Body: {type: daily|monthly|weekly}
    """

    def post(self, request):
        job_type = request.data.get('type')
        scheduler = FeedAutomationScheduler()

        try:
            result = scheduler.run_job(job_type)
        except UnknownJobError:
            return Response(
                {
                    'success': False,
                    'message': f"Invalid automation type. Use one of: {', '.join(scheduler.job_names)}",
                },
                status=status.HTTP_400_BAD_REQUEST
            )

        logger.info(f"Manual trigger of {job_type} feed automation by {request.META.get('REMOTE_ADDR')}")
        return Response({
            'success': True,
            'message': f'{job_type} automation completed successfully',
            'data': result,
        })
