"""HTTP boundary shared by all JSON endpoints.

Views read the session cookie, call one logic function and present the
result. Exceptions raised by the logic layer are translated to status
codes here and nowhere else.
"""

import functools
import json
import logging
from collections.abc import Callable, Iterable
from http import HTTPStatus
from typing import Any, Final

from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist, ValidationError
from django.db import DatabaseError
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt

from server.apps.accounts.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    StoreError,
)
from server.apps.accounts.logic import session_store
from server.apps.accounts.models import Session

logger = logging.getLogger(__name__)

TOTAL_COUNT_HEADER: Final = 'X-Total-Count'

_GENERIC_ERROR: Final = 'Something went wrong. Please try again later'

View = Callable[..., HttpResponse]


def get_cookie_name() -> str:
    """Get the name of the session cookie.

    Returns:
        Cookie name from settings or default of 'fm_session'.
    """
    return getattr(settings, 'ACCOUNTS_SESSION_COOKIE_NAME', 'fm_session')


def session_from_request(request: HttpRequest) -> Session | None:
    """Look up the session named by the request's cookie.

    A live session has its last activity time bumped.

    Args:
        request: Incoming request.

    Returns:
        Live Session, or None when the cookie is missing or stale.
    """
    session_key = request.COOKIES.get(get_cookie_name())
    if not session_key:
        return None
    session = session_store.get_session(session_key)
    if session is not None:
        session_store.touch_session(session.session_key)
    return session


def client_address(request: HttpRequest) -> str | None:
    """Get the client's IP address as seen by Django."""
    return request.META.get('REMOTE_ADDR') or None


def client_user_agent(request: HttpRequest) -> str:
    """Get the client's User-Agent header."""
    return request.META.get('HTTP_USER_AGENT', '')


def parse_json_body(request: HttpRequest) -> dict[str, Any]:
    """Decode a JSON object from the request body.

    An empty body is an empty object. Form-encoded bodies are accepted
    too, so multipart uploads can carry their fields.

    Args:
        request: Incoming request.

    Returns:
        Decoded fields.

    Raises:
        ValidationError: If the body is not a JSON object.
    """
    if request.content_type != 'application/json':
        return request.POST.dict()
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body)
    except (UnicodeDecodeError, json.JSONDecodeError) as error:
        raise ValidationError('Request body is not valid JSON') from error
    if not isinstance(payload, dict):
        raise ValidationError('Request body must be a JSON object')
    return payload


def message_response(
    message: str,
    status: int = HTTPStatus.OK,
    **extra: Any,
) -> JsonResponse:
    """Build a JSON response carrying a ``message`` field.

    Args:
        message: Human readable outcome.
        status: HTTP status code.
        extra: Additional top level fields.

    Returns:
        JsonResponse.
    """
    return JsonResponse({'message': message, **extra}, status=status)


def listing_response(
    message: str,
    items: Iterable[dict[str, Any]],
    key: str,
) -> JsonResponse:
    """Build a listing response with its total count header.

    Args:
        message: Human readable outcome.
        items: Serialized rows.
        key: Field name the rows are placed under.

    Returns:
        JsonResponse with ``X-Total-Count`` set.
    """
    rows = list(items)
    response = message_response(message, **{key: rows})
    response[TOTAL_COUNT_HEADER] = str(len(rows))
    return response


def set_session_cookie(response: HttpResponse, session: Session) -> None:
    """Attach the session cookie with the attributes stored on the session."""
    response.set_cookie(
        get_cookie_name(),
        session.session_key,
        max_age=session.original_max_age,
        path=session.cookie_path,
        secure=session.secure,
        httponly=session.http_only,
        samesite=session.same_site,
    )


def clear_session_cookie(response: HttpResponse) -> None:
    """Expire the session cookie on the client."""
    response.delete_cookie(
        get_cookie_name(),
        path=getattr(settings, 'ACCOUNTS_SESSION_COOKIE_PATH', '/'),
        samesite=getattr(settings, 'ACCOUNTS_SESSION_COOKIE_SAMESITE', 'Lax'),
    )


def _validation_response(error: ValidationError) -> JsonResponse:
    if hasattr(error, 'error_dict'):
        errors = error.message_dict
        first_messages = next(iter(errors.values()), [])
        message = first_messages[0] if first_messages else 'Invalid input'
        return message_response(
            message,
            status=HTTPStatus.BAD_REQUEST,
            errors=errors,
        )
    return message_response(
        ' '.join(error.messages),
        status=HTTPStatus.BAD_REQUEST,
    )


def api_endpoint(view: View) -> View:
    """Wrap a view with the error to status code translation.

    The wrapped view is CSRF exempt: authentication relies on the
    SameSite session cookie, not Django's CSRF token.

    Args:
        view: View function taking the request and the caller's session.

    Returns:
        View function taking only the request (plus URL kwargs).
    """

    @csrf_exempt
    @functools.wraps(view)
    def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> HttpResponse:
        try:
            session = session_from_request(request)
            return view(request, session, *args, **kwargs)
        except (AuthenticationError, AuthorizationError) as error:
            return message_response(str(error), status=HTTPStatus.UNAUTHORIZED)
        except ObjectDoesNotExist as error:
            logger.debug('Not found on %s: %s', request.path, error)
            return message_response(
                'Resource not found',
                status=HTTPStatus.NOT_FOUND,
            )
        except ValidationError as error:
            return _validation_response(error)
        except ConflictError as error:
            return message_response(str(error), status=HTTPStatus.BAD_REQUEST)
        except DatabaseError:
            logger.exception('Database failure on %s %s', request.method, request.path)
            return message_response(
                _GENERIC_ERROR,
                status=HTTPStatus.INTERNAL_SERVER_ERROR,
            )
        except (StoreError, BotoCoreError, ClientError):
            logger.exception('Storage failure on %s %s', request.method, request.path)
            return message_response(
                _GENERIC_ERROR,
                status=HTTPStatus.INTERNAL_SERVER_ERROR,
            )

    return wrapper
