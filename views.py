"""
Aging trigger endpoint.

Called once a day by an external scheduler (cron, GitHub Actions, ...):

    curl -X POST -H "Authorization: Bearer $STOCKWATCH_CRON_SECRET" \\
         https://example.com/stockwatch/cron/update-aging/
"""

import hmac
import logging

from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from stockwatch.conf import stockwatch_settings
from stockwatch.services.reclassify import reclassify

logger = logging.getLogger('stockwatch')


def _authorize(request) -> JsonResponse | None:
    """Return an error response when the bearer secret is missing or wrong."""
    secret = stockwatch_settings.CRON_SECRET
    if not secret:
        logger.error("stock.reclassify.not_configured")
        return JsonResponse({'error': 'Cron job not configured'}, status=500)

    header = request.headers.get('Authorization', '')
    if not hmac.compare_digest(header.encode(), f'Bearer {secret}'.encode()):
        logger.warning(
            "stock.reclassify.unauthorized",
            extra={"remote_addr": request.META.get('REMOTE_ADDR')},
        )
        return JsonResponse({'error': 'Unauthorized'}, status=401)

    return None


@method_decorator(csrf_exempt, name='dispatch')
class UpdateAgingView(View):
    """POST runs the reclassification; GET describes how to call it."""

    http_method_names = ['get', 'post']

    def post(self, request):
        denied = _authorize(request)
        if denied is not None:
            return denied

        try:
            result = reclassify()
        except Exception as exc:
            logger.exception("stock.reclassify.run_failed")
            return JsonResponse(
                {'error': 'Failed to update aging', 'details': str(exc)},
                status=500,
            )
        return JsonResponse(result.as_dict())

    def get(self, request):
        denied = _authorize(request)
        if denied is not None:
            return denied

        return JsonResponse({
            'message': 'Use POST method to trigger aging update',
            'endpoint': request.path,
            'method': 'POST',
        })
