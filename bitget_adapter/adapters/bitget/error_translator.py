"""
Error Translator for Bitget responses.

The venue reports failures in two unrelated ways: spot endpoints send
``{"status": "error", "err_code": ..., "err_msg": ...}`` and swap endpoints send
``{"code": "40017", "msg": ..., "data": null}`` where ``"00000"`` means success.
Some spot responses even put a numeric code in ``err_msg``.

Resolution order:
    1. Non-empty ``err_msg``: exact table, then broad (substring) table
    2. ``code`` / ``err_code`` present and not "00000": exact table
    3. Any of the above present but unmatched: generic ExchangeError
    4. Nothing present: success, return normally

Example:
    >>> translator = ErrorTranslator()
    >>> translator.translate({"code": "00000", "data": []})
    >>> translator.translate({"code": "40009", "msg": ""})
    Traceback (most recent call last):
    ...
    bitget_adapter.exceptions.AuthenticationError: bitget {"code": "40009", "msg": ""}
"""

import json
from typing import Any, Dict, Mapping, Optional, Type

import structlog

from bitget_adapter.exceptions import (
    AccountSuspended,
    ArgumentsRequired,
    AuthenticationError,
    BadRequest,
    BadSymbol,
    BitgetError,
    CancelPending,
    DDoSProtection,
    ExchangeError,
    ExchangeNotAvailable,
    InsufficientFunds,
    InvalidAddress,
    InvalidNonce,
    InvalidOrder,
    OnMaintenance,
    OrderNotFound,
    PermissionDenied,
    RateLimitExceeded,
    RequestTimeout,
)

logger = structlog.get_logger(__name__)

SUCCESS_CODE = "00000"

# Numeric codes, from both surfaces plus the HTTP statuses the swap
# surface echoes in its body.
EXACT_CODE_ERRORS: Dict[str, Type[BitgetError]] = {
    "1": ExchangeError,
    "4010": PermissionDenied,
    "4001": ExchangeError,
    "4002": ExchangeError,
    "30001": AuthenticationError,
    "30002": AuthenticationError,
    "30003": AuthenticationError,
    "30004": AuthenticationError,
    "30005": InvalidNonce,
    "30006": AuthenticationError,
    "30007": BadRequest,
    "30008": RequestTimeout,
    "30009": ExchangeError,
    "30010": AuthenticationError,
    "30011": PermissionDenied,
    "30012": AuthenticationError,
    "30013": AuthenticationError,
    "30014": DDoSProtection,
    "30015": AuthenticationError,
    "30016": ExchangeError,
    "30017": ExchangeError,
    "30018": ExchangeError,
    "30019": ExchangeNotAvailable,
    "30020": BadRequest,
    "30021": BadRequest,
    "30022": PermissionDenied,
    "30023": BadRequest,
    "30024": BadSymbol,
    "30025": BadRequest,
    "30026": DDoSProtection,
    "30027": AuthenticationError,
    "30028": PermissionDenied,
    "30029": AccountSuspended,
    "30030": ExchangeError,
    "30031": BadRequest,
    "30032": BadSymbol,
    "30033": BadRequest,
    "30034": ExchangeError,
    "30035": ExchangeError,
    "30036": ExchangeError,
    "30037": ExchangeNotAvailable,
    "30038": OnMaintenance,
    "32001": AccountSuspended,
    "32002": PermissionDenied,
    "32003": CancelPending,
    "32004": ExchangeError,
    "32005": InvalidOrder,
    "32006": InvalidOrder,
    "32007": InvalidOrder,
    "32008": InvalidOrder,
    "32009": InvalidOrder,
    "32010": ExchangeError,
    "32011": ExchangeError,
    "32012": ExchangeError,
    "32013": ExchangeError,
    "32014": ExchangeError,
    "32015": ExchangeError,
    "32016": ExchangeError,
    "32017": ExchangeError,
    "32018": ExchangeError,
    "32019": ExchangeError,
    "32020": ExchangeError,
    "32021": ExchangeError,
    "32022": ExchangeError,
    "32023": ExchangeError,
    "32024": ExchangeError,
    "32025": ExchangeError,
    "32026": ExchangeError,
    "32027": ExchangeError,
    "32028": AccountSuspended,
    "32029": ExchangeError,
    "32030": InvalidOrder,
    "32031": ArgumentsRequired,
    "32038": AuthenticationError,
    "32040": ExchangeError,
    "32044": ExchangeError,
    "32045": ExchangeError,
    "32046": ExchangeError,
    "32047": ExchangeError,
    "32048": InvalidOrder,
    "32049": ExchangeError,
    "32050": InvalidOrder,
    "32051": InvalidOrder,
    "32052": ExchangeError,
    "32053": ExchangeError,
    "32057": ExchangeError,
    "32054": ExchangeError,
    "32055": InvalidOrder,
    "32056": ExchangeError,
    "32058": ExchangeError,
    "32059": InvalidOrder,
    "32060": InvalidOrder,
    "32061": InvalidOrder,
    "32062": InvalidOrder,
    "32063": InvalidOrder,
    "32064": ExchangeError,
    "32065": ExchangeError,
    "32066": ExchangeError,
    "32067": ExchangeError,
    "32068": ExchangeError,
    "32069": ExchangeError,
    "32070": ExchangeError,
    "32071": ExchangeError,
    "32072": ExchangeError,
    "32073": ExchangeError,
    "32074": ExchangeError,
    "32075": ExchangeError,
    "32076": ExchangeError,
    "32077": ExchangeError,
    "32078": ExchangeError,
    "32079": ExchangeError,
    "32080": ExchangeError,
    "32083": ExchangeError,
    "33001": PermissionDenied,
    "33002": AccountSuspended,
    "33003": InsufficientFunds,
    "33004": ExchangeError,
    "33005": ExchangeError,
    "33006": ExchangeError,
    "33007": ExchangeError,
    "33008": InsufficientFunds,
    "33009": ExchangeError,
    "33010": ExchangeError,
    "33011": ExchangeError,
    "33012": ExchangeError,
    "33013": InvalidOrder,
    "33014": OrderNotFound,
    "33015": InvalidOrder,
    "33016": ExchangeError,
    "33017": InsufficientFunds,
    "33018": ExchangeError,
    "33020": ExchangeError,
    "33021": BadRequest,
    "33022": InvalidOrder,
    "33023": ExchangeError,
    "33024": InvalidOrder,
    "33025": InvalidOrder,
    "33026": ExchangeError,
    "33027": InvalidOrder,
    "33028": InvalidOrder,
    "33029": InvalidOrder,
    "33034": ExchangeError,
    "33035": ExchangeError,
    "33036": ExchangeError,
    "33037": ExchangeError,
    "33038": ExchangeError,
    "33039": ExchangeError,
    "33040": ExchangeError,
    "33041": ExchangeError,
    "33042": ExchangeError,
    "33043": ExchangeError,
    "33044": ExchangeError,
    "33045": ExchangeError,
    "33046": ExchangeError,
    "33047": ExchangeError,
    "33048": ExchangeError,
    "33049": ExchangeError,
    "33050": ExchangeError,
    "33051": ExchangeError,
    "33059": BadRequest,
    "33060": BadRequest,
    "33061": ExchangeError,
    "33062": ExchangeError,
    "33063": ExchangeError,
    "33064": ExchangeError,
    "33065": ExchangeError,
    "21009": ExchangeError,
    "34001": PermissionDenied,
    "34002": InvalidAddress,
    "34003": ExchangeError,
    "34004": ExchangeError,
    "34005": ExchangeError,
    "34006": ExchangeError,
    "34007": ExchangeError,
    "34008": InsufficientFunds,
    "34009": ExchangeError,
    "34010": ExchangeError,
    "34011": ExchangeError,
    "34012": ExchangeError,
    "34013": ExchangeError,
    "34014": ExchangeError,
    "34015": ExchangeError,
    "34016": PermissionDenied,
    "34017": AccountSuspended,
    "34018": AuthenticationError,
    "34019": PermissionDenied,
    "34020": PermissionDenied,
    "34021": InvalidAddress,
    "34022": ExchangeError,
    "34023": PermissionDenied,
    "34026": ExchangeError,
    "34036": ExchangeError,
    "34037": ExchangeError,
    "34038": ExchangeError,
    "34039": ExchangeError,
    "35001": ExchangeError,
    "35002": ExchangeError,
    "35003": ExchangeError,
    "35004": ExchangeError,
    "35005": AuthenticationError,
    "35008": InvalidOrder,
    "35010": InvalidOrder,
    "35012": InvalidOrder,
    "35014": InvalidOrder,
    "35015": InvalidOrder,
    "35017": ExchangeError,
    "35019": InvalidOrder,
    "35020": InvalidOrder,
    "35021": InvalidOrder,
    "35022": ExchangeError,
    "35024": ExchangeError,
    "35025": InsufficientFunds,
    "35026": ExchangeError,
    "35029": OrderNotFound,
    "35030": InvalidOrder,
    "35031": InvalidOrder,
    "35032": ExchangeError,
    "35037": ExchangeError,
    "35039": ExchangeError,
    "35040": InvalidOrder,
    "35044": ExchangeError,
    "35046": InsufficientFunds,
    "35047": InsufficientFunds,
    "35048": ExchangeError,
    "35049": InvalidOrder,
    "35050": InvalidOrder,
    "35052": InsufficientFunds,
    "35053": ExchangeError,
    "35055": InsufficientFunds,
    "35057": ExchangeError,
    "35058": ExchangeError,
    "35059": BadRequest,
    "35060": BadRequest,
    "35061": BadRequest,
    "35062": InvalidOrder,
    "35063": InvalidOrder,
    "35064": InvalidOrder,
    "35066": InvalidOrder,
    "35067": InvalidOrder,
    "35068": InvalidOrder,
    "35069": InvalidOrder,
    "35070": InvalidOrder,
    "35071": InvalidOrder,
    "35072": InvalidOrder,
    "35073": InvalidOrder,
    "35074": InvalidOrder,
    "35075": InvalidOrder,
    "35076": InvalidOrder,
    "35077": InvalidOrder,
    "35078": InvalidOrder,
    "35079": InvalidOrder,
    "35080": InvalidOrder,
    "35081": InvalidOrder,
    "35082": InvalidOrder,
    "35083": InvalidOrder,
    "35084": InvalidOrder,
    "35085": InvalidOrder,
    "35086": InvalidOrder,
    "35087": InvalidOrder,
    "35088": InvalidOrder,
    "35089": InvalidOrder,
    "35090": ExchangeError,
    "35091": ExchangeError,
    "35092": ExchangeError,
    "35093": ExchangeError,
    "35094": ExchangeError,
    "35095": BadRequest,
    "35096": ExchangeError,
    "35097": ExchangeError,
    "35098": ExchangeError,
    "35099": ExchangeError,
    "36001": BadRequest,
    "36002": BadRequest,
    "36005": ExchangeError,
    "36101": AuthenticationError,
    "36102": PermissionDenied,
    "36103": AccountSuspended,
    "36104": PermissionDenied,
    "36105": PermissionDenied,
    "36106": AccountSuspended,
    "36107": PermissionDenied,
    "36108": InsufficientFunds,
    "36109": PermissionDenied,
    "36201": PermissionDenied,
    "36202": PermissionDenied,
    "36203": InvalidOrder,
    "36204": ExchangeError,
    "36205": BadRequest,
    "36206": BadRequest,
    "36207": InvalidOrder,
    "36208": InvalidOrder,
    "36209": InvalidOrder,
    "36210": InvalidOrder,
    "36211": InvalidOrder,
    "36212": InvalidOrder,
    "36213": InvalidOrder,
    "36214": ExchangeError,
    "36216": OrderNotFound,
    "36217": InvalidOrder,
    "36218": InvalidOrder,
    "36219": InvalidOrder,
    "36220": InvalidOrder,
    "36221": InvalidOrder,
    "36222": InvalidOrder,
    "36223": InvalidOrder,
    "36224": InvalidOrder,
    "36225": InvalidOrder,
    "36226": InvalidOrder,
    "36227": InvalidOrder,
    "36228": InvalidOrder,
    "36229": InvalidOrder,
    "36230": InvalidOrder,
    "400": BadRequest,
    "401": AuthenticationError,
    "403": PermissionDenied,
    "404": BadRequest,
    "405": BadRequest,
    "415": BadRequest,
    "429": DDoSProtection,
    "500": ExchangeNotAvailable,
    "1001": RateLimitExceeded,
    "1002": ExchangeError,
    "1003": ExchangeError,
    "40001": AuthenticationError,
    "40002": AuthenticationError,
    "40003": AuthenticationError,
    "40004": InvalidNonce,
    "40005": InvalidNonce,
    "40006": AuthenticationError,
    "40007": BadRequest,
    "40008": InvalidNonce,
    "40009": AuthenticationError,
    "40010": AuthenticationError,
    "40011": AuthenticationError,
    "40012": AuthenticationError,
    "40013": ExchangeError,
    "40014": PermissionDenied,
    "40015": ExchangeError,
    "40016": PermissionDenied,
    "40017": ExchangeError,
    "40018": PermissionDenied,
    "40102": BadRequest,
    "40103": BadRequest,
    "40104": ExchangeError,
    "40105": ExchangeError,
    "40106": ExchangeError,
    "40107": ExchangeError,
    "40108": InvalidOrder,
    "40109": OrderNotFound,
    "40200": OnMaintenance,
    "40201": InvalidOrder,
    "40202": ExchangeError,
    "40203": BadRequest,
    "40204": BadRequest,
    "40205": BadRequest,
    "40206": BadRequest,
    "40207": BadRequest,
    "40208": BadRequest,
    "40209": BadRequest,
    "40300": ExchangeError,
    "40301": PermissionDenied,
    "40302": BadRequest,
    "40303": BadRequest,
    "40304": BadRequest,
    "40305": BadRequest,
    "40306": ExchangeError,
    "40308": OnMaintenance,
    "40309": BadSymbol,
    "40400": ExchangeError,
    "40401": ExchangeError,
    "40402": BadRequest,
    "40403": BadRequest,
    "40404": BadRequest,
    "40405": BadRequest,
    "40406": BadRequest,
    "40407": ExchangeError,
    "40408": ExchangeError,
    "40409": ExchangeError,
    "40500": InvalidOrder,
    "40501": ExchangeError,
    "40502": ExchangeError,
    "40503": ExchangeError,
    "40504": ExchangeError,
    "40505": ExchangeError,
    "40506": AuthenticationError,
    "40507": AuthenticationError,
    "40508": ExchangeError,
    "40509": ExchangeError,
    "40600": ExchangeError,
    "40601": ExchangeError,
    "40602": ExchangeError,
    "40603": ExchangeError,
    "40604": ExchangeNotAvailable,
    "40605": ExchangeError,
    "40606": ExchangeError,
    "40607": ExchangeError,
    "40608": ExchangeError,
    "40609": ExchangeError,
    "40700": BadRequest,
    "40701": ExchangeError,
    "40702": ExchangeError,
    "40703": ExchangeError,
    "40704": ExchangeError,
    "40705": BadRequest,
    "40706": InvalidOrder,
    "40707": BadRequest,
    "40708": BadRequest,
    "40709": ExchangeError,
    "40710": ExchangeError,
    "40711": InsufficientFunds,
    "40712": InsufficientFunds,
    "40713": ExchangeError,
    "40714": ExchangeError,
    "50003": ExchangeError,
    "50004": BadSymbol,
    "50006": PermissionDenied,
    "50007": PermissionDenied,
    "50008": RequestTimeout,
    "50009": RateLimitExceeded,
    "50010": ExchangeError,
    "50014": InvalidOrder,
    "50015": InvalidOrder,
    "50016": InvalidOrder,
    "50017": InvalidOrder,
    "50018": InvalidOrder,
    "50019": InvalidOrder,
    "50020": InsufficientFunds,
    "50021": InvalidOrder,
    "50026": InvalidOrder,
}

# Free-text err_msg values sent by the spot surface.
EXACT_MESSAGE_ERRORS: Dict[str, Type[BitgetError]] = {
    "failure to get a peer from the ring-balancer": ExchangeNotAvailable,
    "invalid sign": AuthenticationError,
    "invalid currency": BadSymbol,
    "invalid symbol": BadSymbol,
    "invalid period": BadRequest,
    "invalid user": ExchangeError,
    "invalid amount": InvalidOrder,
    "invalid type": InvalidOrder,
    "invalid orderId": InvalidOrder,
    "invalid record": ExchangeError,
    "invalid accountId": BadRequest,
    "invalid address": BadRequest,
    "accesskey not null": AuthenticationError,
    "illegal accesskey": AuthenticationError,
    "sign not null": AuthenticationError,
    "req_time is too much difference from server time": InvalidNonce,
    "permissions not right": PermissionDenied,
    "illegal sign invalid": AuthenticationError,
    "user locked": AccountSuspended,
    "Request Frequency Is Too High": RateLimitExceeded,
    "more than a daily rate of cash": BadRequest,
    "more than the maximum daily withdrawal amount": BadRequest,
    "need to bind email or mobile": ExchangeError,
    "user forbid": PermissionDenied,
    "User Prohibited Cash Withdrawal": PermissionDenied,
    "Cash Withdrawal Is Less Than The Minimum Value": BadRequest,
    "Cash Withdrawal Is More Than The Maximum Value": BadRequest,
    "the account with in 24 hours ban coin": PermissionDenied,
    "order cancel fail": BadRequest,
    "base symbol error": BadSymbol,
    "base date error": ExchangeError,
    "api signature not valid": AuthenticationError,
    "gateway internal error": ExchangeError,
    "audit failed": ExchangeError,
    "order queryorder invalid": BadRequest,
    "market no need price": InvalidOrder,
    "limit need price": InvalidOrder,
    "userid not equal to account_id": ExchangeError,
    "your balance is low": InsufficientFunds,
    "address invalid cointype": ExchangeError,
    "system exception": ExchangeError,
    "invalid order query time": ExchangeError,
    "invalid start time": BadRequest,
    "invalid end time": BadRequest,
}

BROAD_MESSAGE_ERRORS: Dict[str, Type[BitgetError]] = {
    "invalid size, valid range": ExchangeError,
}


class ErrorTranslator:
    """
    Maps decoded venue payloads to typed exceptions.

    The translator is stateless; tables are fixed at construction so that
    tests can inject smaller ones.

    Args:
        exchange_id: Prefix of every error message.
        exact: Exact-match table (codes and messages share one namespace).
        broad: Substring table, checked against the message only.
    """

    def __init__(
        self,
        exchange_id: str = "bitget",
        exact: Optional[Mapping[str, Type[BitgetError]]] = None,
        broad: Optional[Mapping[str, Type[BitgetError]]] = None,
    ):
        self.exchange_id = exchange_id
        self._exact = (
            dict(exact)
            if exact is not None
            else {**EXACT_CODE_ERRORS, **EXACT_MESSAGE_ERRORS}
        )
        self._broad = dict(broad) if broad is not None else dict(BROAD_MESSAGE_ERRORS)

    def translate(self, payload: Any, body: Optional[str] = None) -> None:
        """
        Raise the typed error encoded in a decoded response body, if any.

        Args:
            payload: Decoded JSON body. Non-dict payloads carry no signal.
            body: Raw body text; attached to the raised error.

        Raises:
            BitgetError: Subclass mapped from the message or code, or
                ExchangeError when the payload signals failure without a
                known message or code.
        """
        if not isinstance(payload, dict):
            return

        message = payload.get("err_msg")
        message = None if message is None else str(message)
        code = payload.get("code")
        if code is None:
            code = payload.get("err_code")
        code = None if code is None else str(code)

        if body is None:
            body = json.dumps(payload, default=str)
        feedback = f"{self.exchange_id} {body}"

        has_message = message is not None and message != ""
        if has_message:
            self._raise_exact(message, feedback, body, payload)
            self._raise_broad(message, feedback, body, payload)

        has_code = code not in (None, "", SUCCESS_CODE)
        if has_code:
            self._raise_exact(code, feedback, body, payload)

        if has_message or has_code:
            logger.warning(
                "unmapped_venue_error",
                exchange=self.exchange_id,
                code=code,
                message=message,
            )
            raise ExchangeError(feedback, body=body, payload=payload)

    def translate_http_status(
        self,
        status: int,
        body: Optional[str] = None,
        payload: Any = None,
    ) -> None:
        """
        Raise for a non-2xx response whose body carried no venue signal.

        The status is looked up in the exact table (429, 500, ...); anything
        else becomes a generic ExchangeError.

        Args:
            status: HTTP status code.
            body: Raw body text.
            payload: Decoded body, if it was JSON.
        """
        if 200 <= status < 300:
            return
        feedback = f"{self.exchange_id} {status} {body or ''}".rstrip()
        error_class = self._exact.get(str(status), ExchangeError)
        raise error_class(feedback, body=body, payload=payload)

    def _raise_exact(
        self, key: str, feedback: str, body: Optional[str], payload: Any
    ) -> None:
        error_class = self._exact.get(key)
        if error_class is not None:
            raise error_class(feedback, body=body, payload=payload)

    def _raise_broad(
        self, message: str, feedback: str, body: Optional[str], payload: Any
    ) -> None:
        for fragment, error_class in self._broad.items():
            if fragment in message:
                raise error_class(feedback, body=body, payload=payload)
