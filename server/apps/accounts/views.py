"""JSON endpoints for users and sessions."""

from http import HTTPStatus

from django.http import HttpRequest, HttpResponse
from django.views.decorators.http import require_http_methods

from server.apps.accounts.logic import (
    authenticator,
    session_store,
    user_operations,
)
from server.apps.accounts.logic.presenters import present_session, present_user
from server.apps.accounts.models import Session
from server.apps.accounts.transport import (
    api_endpoint,
    clear_session_cookie,
    client_address,
    client_user_agent,
    listing_response,
    message_response,
    parse_json_body,
    set_session_cookie,
)


@require_http_methods(['POST'])
@api_endpoint
def register(request: HttpRequest, session: Session | None) -> HttpResponse:
    payload = parse_json_body(request)
    user = authenticator.register(
        username=payload.get('username', ''),
        email=payload.get('email', ''),
        password=payload.get('password', ''),
    )
    return message_response(
        'User registered successfully',
        status=HTTPStatus.CREATED,
        user=present_user(user),
    )


@require_http_methods(['POST'])
@api_endpoint
def login(request: HttpRequest, session: Session | None) -> HttpResponse:
    payload = parse_json_body(request)
    new_session = authenticator.authenticate(
        username=payload.get('username', ''),
        password=payload.get('password', ''),
        current_session=session,
        cookie=session_store.get_cookie_settings(),
        ip_address=client_address(request),
        user_agent=client_user_agent(request),
    )
    response = message_response(
        'Logged in successfully',
        user=present_user(new_session.user),
    )
    set_session_cookie(response, new_session)
    return response


@require_http_methods(['GET'])
@api_endpoint
def logout(request: HttpRequest, session: Session | None) -> HttpResponse:
    authenticator.terminate(session)
    response = message_response('Logged out successfully')
    clear_session_cookie(response)
    return response


@require_http_methods(['GET'])
@api_endpoint
def get_current_session(
    request: HttpRequest,
    session: Session | None,
) -> HttpResponse:
    current = session_store.current_session(session)
    return message_response(
        'Session found',
        session=present_session(current),
    )


@require_http_methods(['GET'])
@api_endpoint
def all_users(request: HttpRequest, session: Session | None) -> HttpResponse:
    users = user_operations.list_users(session)
    return listing_response(
        'Users found',
        (present_user(user) for user in users),
        key='users',
    )


@require_http_methods(['GET'])
@api_endpoint
def user_detail(
    request: HttpRequest,
    session: Session | None,
    user_id: int,
) -> HttpResponse:
    user = user_operations.get_user(session, user_id)
    return message_response('User found', user=present_user(user))


@require_http_methods(['PUT'])
@api_endpoint
def my_profile(request: HttpRequest, session: Session | None) -> HttpResponse:
    payload = parse_json_body(request)
    user = user_operations.update_profile(session, payload.get('email', ''))
    return message_response('Profile updated', user=present_user(user))


@require_http_methods(['PUT'])
@api_endpoint
def my_password(request: HttpRequest, session: Session | None) -> HttpResponse:
    payload = parse_json_body(request)
    user_operations.change_password(
        session,
        payload.get('old_password', ''),
        payload.get('new_password', ''),
    )
    return message_response('Password changed')


@require_http_methods(['DELETE'])
@api_endpoint
def delete_my_account(
    request: HttpRequest,
    session: Session | None,
) -> HttpResponse:
    result = user_operations.delete_my_account(session)
    response = message_response(
        'Account deleted',
        files_deleted=result.files_deleted,
        sessions_deleted=result.sessions_deleted,
    )
    clear_session_cookie(response)
    return response


@require_http_methods(['DELETE'])
@api_endpoint
def delete_user(
    request: HttpRequest,
    session: Session | None,
    user_id: int,
) -> HttpResponse:
    result = user_operations.delete_user(session, user_id)
    return message_response(
        'User deleted',
        files_deleted=result.files_deleted,
        sessions_deleted=result.sessions_deleted,
    )


@require_http_methods(['DELETE'])
@api_endpoint
def delete_all_users(
    request: HttpRequest,
    session: Session | None,
) -> HttpResponse:
    deleted = user_operations.delete_all_users(session)
    return message_response('Users deleted', users_deleted=deleted)


@require_http_methods(['GET'])
@api_endpoint
def all_sessions(request: HttpRequest, session: Session | None) -> HttpResponse:
    sessions = session_store.list_sessions(session)
    return listing_response(
        'Sessions found',
        (present_session(row) for row in sessions),
        key='sessions',
    )


@require_http_methods(['GET'])
@api_endpoint
def sessions_by_user(
    request: HttpRequest,
    session: Session | None,
    user_id: int,
) -> HttpResponse:
    sessions = session_store.list_sessions_for_user(session, user_id)
    return listing_response(
        'Sessions found',
        (present_session(row) for row in sessions),
        key='sessions',
    )


@require_http_methods(['DELETE'])
@api_endpoint
def revoke_session(
    request: HttpRequest,
    session: Session | None,
    session_id: int,
) -> HttpResponse:
    session_store.revoke_session(session, session_id)
    return message_response('Session revoked')
