"""Redirect payload codec.

A payload is the text embedded in a scannable code. It is an absolute URL of
the form ``<origin>/<redirect-path>?<param>=<value>`` where ``<param>`` is
either the id key (value is a record id) or the url key (value is the
percent-encoded destination).
"""

import logging
from typing import Optional
from urllib.parse import parse_qsl, urlsplit

from .common.url_builder import build_redirect_url, encode_uri_component
from .common.validators import is_blank
from .errors import InvalidDestination, MissingPayload
from .models import PayloadStrategy, RedirectPayload

DEFAULT_REDIRECT_PATH = "/q"
DEFAULT_ID_PARAM = "id"
DEFAULT_URL_PARAM = "url"


class PayloadCodec:
    """Encode and decode redirect payloads."""

    def __init__(
        self,
        base_url: str = "http://localhost:9300",
        redirect_path: str = DEFAULT_REDIRECT_PATH,
        id_param: str = DEFAULT_ID_PARAM,
        url_param: str = DEFAULT_URL_PARAM,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize payload codec.

        Args:
            base_url: Origin the generated payload URLs point to
            redirect_path: Path of the redirect endpoint
            id_param: Query key carrying a record id
            url_param: Query key carrying an inline destination URL
            logger: Optional logger
        """
        if id_param == url_param:
            raise ValueError("id_param and url_param must differ")

        self.base_url = base_url
        self.redirect_path = redirect_path
        self.id_param = id_param
        self.url_param = url_param
        self.logger = logger or logging.getLogger(__name__)

    def with_origin(self, base_url: str) -> "PayloadCodec":
        """Copy of this codec that builds payloads for another origin."""
        return PayloadCodec(
            base_url=base_url,
            redirect_path=self.redirect_path,
            id_param=self.id_param,
            url_param=self.url_param,
            logger=self.logger,
        )

    def encode_inline(self, url: str) -> str:
        """Embed a destination URL directly in the payload.

        Raises:
            InvalidDestination: If url is blank
        """
        if is_blank(url):
            raise InvalidDestination()

        return build_redirect_url(
            self.base_url,
            self.redirect_path,
            self.url_param,
            encode_uri_component(url),
        )

    def encode_by_id(self, record_id: str) -> str:
        """Embed a record id reference in the payload."""
        return build_redirect_url(
            self.base_url,
            self.redirect_path,
            self.id_param,
            encode_uri_component(str(record_id)),
        )

    def decode(self, payload: str) -> RedirectPayload:
        """Parse a payload back into its strategy and value.

        Accepts a full URL, a ``?query`` string, or a bare query string. The id
        key wins when both keys are present.

        Raises:
            MissingPayload: If neither recognized key is present
        """
        params = dict(parse_qsl(self._query_part(payload or ""), keep_blank_values=True))

        if self.id_param in params:
            return RedirectPayload(PayloadStrategy.BY_ID, params[self.id_param])

        if self.url_param in params:
            return RedirectPayload(PayloadStrategy.INLINE, params[self.url_param])

        raise MissingPayload()

    def decode_params(self, params) -> RedirectPayload:
        """Decode from already-parsed query parameters (e.g. request.query_params)."""
        if self.id_param in params:
            return RedirectPayload(PayloadStrategy.BY_ID, params[self.id_param])

        if self.url_param in params:
            return RedirectPayload(PayloadStrategy.INLINE, params[self.url_param])

        raise MissingPayload()

    @staticmethod
    def _query_part(payload: str) -> str:
        payload = payload.strip()
        head, sep, tail = payload.partition("?")
        # A bare query; its values may hold an unencoded '?' or '://'.
        if "=" in head:
            return payload
        if urlsplit(head).scheme:
            return urlsplit(payload).query
        return tail if sep else payload
