from datetime import datetime, timedelta, timezone

from django.conf import settings
from rest_framework import status as http_status
from rest_framework.response import Response

from common.consts.http_const import RET_CODE_OK
from common.utils.date_util import get_date_str_of_datetime


def resp_ok(data=None):
    response = Response({
        "data": data,
        "code": RET_CODE_OK,
        "errmsg": ""
    }, status=http_status.HTTP_200_OK)
    response["Expires"] = get_date_str_of_datetime((datetime.now(timezone.utc) + timedelta(seconds=5)),
                                                   "%a, %d %b %Y %H:%M:%S %Z")
    return response


def resp_warn(message, data=None):
    return Response({
        "data": data,
        "code": RET_CODE_OK,
        "errmsg": message
    }, status=http_status.HTTP_200_OK)


def resp_err(message, code=-1, status=http_status.HTTP_200_OK):
    return Response({
        "data": None,
        "code": code,
        "errmsg": message
    }, status=status)


def resp_exception(e: Exception, code=-1, status=http_status.HTTP_200_OK):
    if settings.DEBUG:
        message = repr(e)
    else:
        message = str(e)
    return Response({
        "data": None,
        "code": code,
        "errmsg": message
    }, status=status)
