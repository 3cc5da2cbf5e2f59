"""HTTP helpers shared by the API views."""

from rest_framework import serializers, status
from rest_framework.response import Response

from utils.rbac import Principal
from utils.service_base import ErrorKind, ServiceResult

ERROR_STATUS = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.REFERENCE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.AUTHORIZATION: status.HTTP_403_FORBIDDEN,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
}


class ErrorResponseSerializer(serializers.Serializer):
    """Standard error response"""

    error = serializers.CharField(help_text="Error code identifier")
    message = serializers.CharField(help_text="Human-readable error message")
    fields = serializers.DictField(
        child=serializers.ListField(child=serializers.CharField()),
        help_text="Field-level validation messages",
        required=False,
    )


def principal_of(request):
    return Principal.from_user(getattr(request, "user", None))


def error_response(result: ServiceResult) -> Response:
    body = {"error": result.error, "message": result.error_detail}
    if result.error_fields:
        body["fields"] = result.error_fields
    return Response(body, status=ERROR_STATUS.get(result.kind, status.HTTP_400_BAD_REQUEST))


def result_response(result: ServiceResult, serialize=None, success_status=status.HTTP_200_OK) -> Response:
    """Map a ServiceResult to a DRF Response.

    ``serialize`` turns the success value into response data; when omitted
    the value is returned as-is.
    """
    if not result.ok:
        return error_response(result)
    data = serialize(result.value) if serialize is not None else result.value
    return Response(data, status=success_status)
