"""JSON endpoints for uploaded files, plus the binary download."""

from http import HTTPStatus

from django.core.exceptions import ValidationError
from django.http import FileResponse, HttpRequest, HttpResponse
from django.views.decorators.http import require_http_methods

from server.apps.accounts.logic.authorizer import (
    MustBeAuthenticated,
    require,
    resolve_user,
)
from server.apps.accounts.models import Session
from server.apps.accounts.transport import (
    api_endpoint,
    listing_response,
    message_response,
    parse_json_body,
)
from server.apps.files.logic import file_registry
from server.apps.files.logic.presenters import present_file

# Multipart field carrying the upload
_UPLOAD_FIELD = 'file'


def _viewer_id(session: Session | None) -> int | None:
    viewer = resolve_user(session)
    return viewer.pk if viewer is not None else None


@require_http_methods(['POST'])
@api_endpoint
def upload(request: HttpRequest, session: Session | None) -> HttpResponse:
    uploaded = request.FILES.get(_UPLOAD_FIELD)
    if uploaded is None:
        require(session, MustBeAuthenticated())
        raise ValidationError({_UPLOAD_FIELD: 'No file was uploaded'})

    file_instance = file_registry.upload(
        session,
        request.POST.get('filename') or uploaded.name,
        uploaded,
        content_type=uploaded.content_type,
        size_bytes=uploaded.size,
    )
    return message_response(
        'File uploaded successfully',
        status=HTTPStatus.CREATED,
        file=present_file(file_instance, file_instance.owner_id),
    )


@require_http_methods(['GET'])
@api_endpoint
def my_files(request: HttpRequest, session: Session | None) -> HttpResponse:
    files = file_registry.list_owned(session)
    viewer_id = _viewer_id(session)
    return listing_response(
        'Files found',
        (present_file(file_instance, viewer_id) for file_instance in files),
        key='files',
    )


@require_http_methods(['GET'])
@api_endpoint
def all_files(request: HttpRequest, session: Session | None) -> HttpResponse:
    files = file_registry.list_all(session)
    viewer_id = _viewer_id(session)
    return listing_response(
        'Files found',
        (present_file(file_instance, viewer_id) for file_instance in files),
        key='files',
    )


@require_http_methods(['GET'])
@api_endpoint
def user_files(
    request: HttpRequest,
    session: Session | None,
    user_id: int,
) -> HttpResponse:
    files = file_registry.list_owned_by(session, user_id)
    viewer_id = _viewer_id(session)
    return listing_response(
        'Files found',
        (present_file(file_instance, viewer_id) for file_instance in files),
        key='files',
    )


@require_http_methods(['GET'])
@api_endpoint
def file_detail(
    request: HttpRequest,
    session: Session | None,
    file_id: int,
) -> HttpResponse:
    file_instance = file_registry.get(session, file_id)
    return message_response(
        'File found',
        file=present_file(file_instance, _viewer_id(session)),
    )


@require_http_methods(['PUT'])
@api_endpoint
def update_file(
    request: HttpRequest,
    session: Session | None,
    file_id: int,
) -> HttpResponse:
    payload = parse_json_body(request)
    file_instance = file_registry.rename(
        session,
        file_id,
        payload.get('filename', ''),
    )
    return message_response(
        'File renamed',
        file=present_file(file_instance, _viewer_id(session)),
    )


@require_http_methods(['DELETE'])
@api_endpoint
def delete_file(
    request: HttpRequest,
    session: Session | None,
    file_id: int,
) -> HttpResponse:
    file_registry.delete(session, file_id)
    return message_response('File deleted')


@require_http_methods(['DELETE'])
@api_endpoint
def delete_my_files(
    request: HttpRequest,
    session: Session | None,
) -> HttpResponse:
    deleted = file_registry.delete_mine(session)
    return message_response('Files deleted', files_deleted=deleted)


@require_http_methods(['DELETE'])
@api_endpoint
def delete_all_files(
    request: HttpRequest,
    session: Session | None,
) -> HttpResponse:
    deleted = file_registry.delete_all(session)
    return message_response('Files deleted', files_deleted=deleted)


@require_http_methods(['DELETE'])
@api_endpoint
def delete_user_files(
    request: HttpRequest,
    session: Session | None,
    user_id: int,
) -> HttpResponse:
    deleted = file_registry.delete_all_owned_by(session, user_id)
    return message_response('Files deleted', files_deleted=deleted)


@require_http_methods(['GET'])
@api_endpoint
def download(
    request: HttpRequest,
    session: Session | None,
    file_id: int,
) -> HttpResponse:
    result = file_registry.download(session, file_id)
    response = FileResponse(
        result.stream,
        as_attachment=True,
        filename=result.filename,
        content_type=result.content_type,
    )
    response['Content-Length'] = str(result.size_bytes)
    return response
