"""Apply a parameter tree to an outgoing request and its session settings."""

from __future__ import annotations

import dataclasses
import logging

from reqkit.core.compose import flatten
from reqkit.core.multipart import encode_form
from reqkit.ports.http import PreparedRequest, RequestDefinition
from reqkit.ports.params import Body, Form, FormField, Header, ParamNode, Timeout, TimeoutSource
from reqkit.ports.session import SessionSettings

__all__ = ["apply_param", "build_request"]

logger = logging.getLogger(__name__)


def apply_param(node: ParamNode, request: PreparedRequest, session: SessionSettings) -> None:
    """Apply every leaf of ``node`` in order.

    Args:
        node: Parameter tree.
        request: Outgoing request, mutated in place.
        session: Session settings, mutated in place.
    """
    for leaf in flatten(node):
        match leaf:
            case Header(key=key, value=value):
                request.headers[key] = value
            case Body(data=data):
                request.body = data
            case Timeout(seconds=seconds, source=source):
                if TimeoutSource.REQUEST in source:
                    session.request_timeout_sec = seconds
                if TimeoutSource.RESOURCE in source:
                    session.resource_timeout_sec = seconds
            case FormField():
                _apply_form((leaf,), request)
            case Form(fields=fields):
                _apply_form(fields, request)
            case _:
                raise TypeError(f"Unsupported request parameter: {leaf!r}")


def _apply_form(fields: tuple[FormField, ...], request: PreparedRequest) -> None:
    body = encode_form(fields)
    request.headers["Content-Type"] = body.content_type
    request.headers["Content-Length"] = str(body.content_length)
    request.body = body.data
    logger.debug(f"Encoded {len(fields)} form field(s) into {body.content_length} bytes")


def build_request(
    definition: RequestDefinition,
    defaults: SessionSettings | None = None,
) -> tuple[PreparedRequest, SessionSettings]:
    """Build the outgoing request for one run.

    Args:
        definition: Immutable request description.
        defaults: Session settings to start from; copied, never mutated.

    Returns:
        The prepared request and the session settings for this run.
    """
    request = PreparedRequest(method=definition.method, url=definition.url)
    session = dataclasses.replace(defaults) if defaults is not None else SessionSettings()
    apply_param(definition.param, request, session)
    return request, session
