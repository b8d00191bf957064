"""AT command strings for SIM800-class modems and the telemetry URL format."""

from __future__ import annotations

from src.core.types import TelemetryRecord

CTRL_Z = b"\x1a"  # terminates an SMS body

TEXT_MODE = "AT+CMGF=1"
BEARER_CONTYPE = 'AT+SAPBR=3,1,"Contype","GPRS"'
BEARER_OPEN = "AT+SAPBR=1,1"
# Querying the assigned IP before HTTPINIT avoids spurious HTTP errors.
BEARER_QUERY = "AT+SAPBR=2,1"
BEARER_CLOSE = "AT+SAPBR=0,1"
HTTP_INIT = "AT+HTTPINIT"
HTTP_SSL = "AT+HTTPSSL=1"
HTTP_CID = 'AT+HTTPPARA="CID",1'
HTTP_GET = "AT+HTTPACTION=0"
HTTP_TERM = "AT+HTTPTERM"


def sms_recipient(number: str) -> str:
    return f'AT+CMGS="{number}"'


def apn_credentials(apn: str, user: str, password: str) -> str:
    return f'AT+CSTT="{apn}","{user}","{password}"'


def http_url(url: str) -> str:
    return f'AT+HTTPPARA="URL","{url}"'


def telemetry_url(
    host: str,
    secret: str,
    record: TelemetryRecord,
    include_temperature: bool = False,
) -> str:
    """Positional, slash-delimited telemetry URL.

    ``<host>/<secret>/<level>`` or ``<host>/<secret>/<level>/<temp>/``.
    Values are plain integers so nothing needs escaping.
    """
    url = f"{host.rstrip('/')}/{secret}/{record.level}"
    if include_temperature:
        temp = record.temperature_tenths if record.temperature_tenths is not None else ""
        url = f"{url}/{temp}/"
    return url
