"""JSON endpoints for the language catalogue."""

from http import HTTPStatus

from django.http import HttpRequest, HttpResponse
from django.views.decorators.http import require_http_methods

from server.apps.accounts.models import Session
from server.apps.accounts.transport import (
    api_endpoint,
    listing_response,
    message_response,
    parse_json_body,
)
from server.apps.languages.logic import language_operations
from server.apps.languages.logic.language_operations import present_language


@require_http_methods(['GET', 'POST'])
@api_endpoint
def languages(request: HttpRequest, session: Session | None) -> HttpResponse:
    if request.method == 'POST':
        payload = parse_json_body(request)
        language = language_operations.create_language(
            session,
            payload.get('name', ''),
            payload.get('display_name', ''),
        )
        return message_response(
            'Language created successfully',
            status=HTTPStatus.CREATED,
            language=present_language(language),
        )

    return listing_response(
        'Languages found',
        (
            present_language(language)
            for language in language_operations.list_languages(session)
        ),
        key='languages',
    )


@require_http_methods(['GET', 'PUT', 'DELETE'])
@api_endpoint
def language_detail(
    request: HttpRequest,
    session: Session | None,
    language_id: int,
) -> HttpResponse:
    if request.method == 'DELETE':
        language_operations.delete_language(session, language_id)
        return message_response('Language deleted successfully')

    if request.method == 'PUT':
        payload = parse_json_body(request)
        language = language_operations.update_language(
            session,
            language_id,
            name=payload.get('name'),
            display_name=payload.get('display_name'),
        )
        return message_response(
            'Language updated successfully',
            language=present_language(language),
        )

    language = language_operations.get_language(session, language_id)
    return message_response('Language found', language=present_language(language))
