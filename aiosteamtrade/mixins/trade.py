import logging
from asyncio import CancelledError
from typing import Sequence

from ..constants import NEW_TRADE_OFFER_PATH, JSON_HEADERS
from ..exceptions import ProtocolError
from ..models import Asset, TradeOfferAsset, SubmissionResult
from ..trade import TradeOffer
from ..typed import SendTradeOfferResponse
from ..utils import generate_session_id, compose_cookie
from .http import SteamHTTPTransportMixin

logger = logging.getLogger(__name__)


class TradeMixin(SteamHTTPTransportMixin):
    """
    Mixin with trade offers related methods.
    Depends on `SteamHTTPTransportMixin`.
    """

    __slots__ = ()

    # required instance attributes
    cookie: str | None

    async def send_trade_offer(self, offer: TradeOffer, *, cookie: str = None) -> SubmissionResult:
        """
        Submit trade offer to `Steam`. Offer moves to `SUBMITTED` state with result
        or to `FAILED` state with error, which is raised.

        :param offer: offer in `DRAFT` state with at least one item
        :param cookie: `Cookie` header value, client cookie by default
        :return: result of submission
        :raises ValueError: offer is empty or not a draft, no cookie available
        :raises ForbiddenError: cookie is invalid or expired
        :raises RateLimitedError: when you hit rate limit
        :raises UnexpectedStatusError: other non-success statuses
        :raises ProtocolError: `Steam` response does not contain trade offer id
        :raises NetworkError:
        """

        cookie = cookie or self.cookie
        if not cookie:
            raise ValueError("You must login or pass cookie to send trade offer")

        offer._begin_submission()

        session_id = generate_session_id()  # fresh one for each submission
        logger.debug("Generated session id for trade offer submission")
        headers = {
            **JSON_HEADERS,
            "Referer": str(offer.make_referer(self.community_url)),
            "Cookie": compose_cookie(cookie, session_id),
        }

        try:
            rj: SendTradeOfferResponse = await self._request_json(
                "POST",
                self.community_url / NEW_TRADE_OFFER_PATH / "send",
                data=offer.to_form(session_id),
                headers=headers,
                what="Send trade offer",
            )
            result = self._parse_send_response(rj)
        except (Exception, CancelledError) as e:  # offer must not stay in SUBMITTING
            offer._mark_failed(e)
            raise

        offer._mark_submitted(result)
        logger.info("Trade offer %d sent to %d", result.offer_id, offer.partner_id)
        return result

    @staticmethod
    def _parse_send_response(rj: SendTradeOfferResponse) -> SubmissionResult:
        try:
            offer_id = int(rj["tradeofferid"])
        except (KeyError, TypeError, ValueError) as e:
            raise ProtocolError(rj.get("strError") or "Response has no valid trade offer id", rj) from e

        return SubmissionResult(
            offer_id=offer_id,
            needs_mobile_confirmation=bool(rj.get("needs_mobile_confirmation")),
            needs_email_confirmation=bool(rj.get("needs_email_confirmation")),
            email_domain=rj.get("email_domain") or None,
            raw=rj,
        )

    async def make_trade_offer(
        self,
        obj: int | str,
        to_give: Sequence[TradeOfferAsset | Asset] = (),
        to_receive: Sequence[TradeOfferAsset | Asset] = (),
        message="",
        *,
        token: str = None,
        cookie: str = None,
    ) -> SubmissionResult:
        """
        Make (send) steam trade offer to partner.

        .. note:: Make sure that partner is in friends list if you not pass trade url or trade token.

        :param obj: partner trade url, partner id(id32 or id64)
        :param to_give: sequence of items that you want to give
        :param to_receive: sequence of items that you want to receive
        :param message: message to the partner
        :param token: trade token (mandatory if `obj` is partner id, must not be passed with trade url)
        :param cookie: `Cookie` header value, client cookie by default
        :return: result of submission
        :raises ValueError: trade is empty
        """

        if not to_give and not to_receive:
            raise ValueError("You can't make empty trade offer!")

        offer = TradeOffer.create(obj, token)
        offer.add_self_items(to_give)
        offer.add_partner_items(to_receive)
        offer.set_message(message)

        return await self.send_trade_offer(offer, cookie=cookie)
