import json
import logging
from functools import wraps

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.serializers.json import DjangoJSONEncoder
from django.http import HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .exceptions import BooksError, ValidationFailed

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 500


def ok(data, status=200):
    return JsonResponse({"success": True, "data": data}, status=status, encoder=DjangoJSONEncoder)


def fail(code, message, status=400, **extra):
    error = {"code": code, "message": message, **extra}
    return JsonResponse({"success": False, "error": error}, status=status)


def _validation_message(exc):
    if hasattr(exc, "message_dict"):
        return "; ".join(
            f"{field}: {' '.join(msgs)}" if field != "__all__" else " ".join(msgs)
            for field, msgs in exc.message_dict.items()
        )
    return " ".join(exc.messages)


def api_view(*methods, tenant=True):
    """Wrap a view so every outcome is a JSON envelope.

    The view returns plain data (rendered with ``ok``) or an HttpResponse.
    BooksError and model ValidationError become structured errors; anything
    else is logged and reported as INTERNAL_ERROR.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(request, *args, **kwargs):
            if tenant and getattr(request, "company", None) is None:
                return fail("TENANT_REQUIRED", "Send a known company in the X-Tenant-ID header")
            try:
                result = view(request, *args, **kwargs)
            except BooksError as exc:
                logger.info("%s %s -> %s: %s", request.method, request.path, exc.code, exc.message)
                return JsonResponse({"success": False, "error": exc.as_dict()}, status=exc.status,
                                    encoder=DjangoJSONEncoder)
            except ValidationError as exc:
                return fail("VALIDATION_ERROR", _validation_message(exc))
            except Exception:
                logger.exception("Unhandled error on %s %s", request.method, request.path)
                return fail("INTERNAL_ERROR", "An unexpected error occurred.", status=500)
            if isinstance(result, HttpResponse):
                return result
            return ok(result)

        return csrf_exempt(require_http_methods(list(methods))(wrapper))

    return decorator


def parse_json(request):
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body)
    except (ValueError, UnicodeDecodeError):
        raise ValidationFailed("Malformed JSON body")
    if not isinstance(payload, dict):
        raise ValidationFailed("JSON body must be an object")
    return payload


def actor_for(request):
    """Free-text name recorded in the audit log."""
    return request.headers.get("X-User-Name") or request.headers.get("X-User-ID") or ""


def paginate(request, queryset):
    """Slice by ?limit=&offset= (limit capped)."""
    try:
        limit = int(request.GET.get("limit", settings.BOOKS_DEFAULT_PAGE_SIZE))
        offset = int(request.GET.get("offset", 0))
    except ValueError:
        raise ValidationFailed("limit and offset must be integers")
    if limit < 1 or offset < 0:
        raise ValidationFailed("limit must be positive and offset non-negative")
    limit = min(limit, MAX_PAGE_SIZE)
    return queryset[offset:offset + limit]


def filtered(filterset_class, request, queryset):
    fs = filterset_class(request.GET, queryset=queryset)
    if not fs.is_valid():
        raise ValidationFailed(
            "; ".join(f"{f}: {' '.join(e)}" for f, e in fs.errors.items())
        )
    return fs.qs
