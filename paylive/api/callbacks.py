"""
PayLIVE callback endpoint.

PayLIVE notifies the merchant's callback URL once a payer completes payment.
The notification carries the transaction id that confirm_transaction needs.
The router only parses the notification and hands it to the handler; the
handler decides whether and when to confirm.

Plain (sync) handlers run in the threadpool, so they may call the connector
directly. Coroutine handlers run on the event loop and must not make
blocking connector calls.
"""

import inspect
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Union

from fastapi import APIRouter, HTTPException, Request
from starlette.concurrency import run_in_threadpool
from starlette.formparsers import MultiPartException

from paylive.integrations.contracts.payments import PaymentCallback
from paylive.integrations.policy.response_wrappers import IntegrationResponseError, normalize_callback

logger = logging.getLogger(__name__)

CallbackHandler = Callable[[PaymentCallback], Union[Any, Awaitable[Any]]]

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def _bad_request(message: str) -> HTTPException:
    return HTTPException(status_code=400, detail={"message": message})


async def _read_json(request: Request) -> Dict[str, Any]:
    try:
        body = json.loads(await request.body())
    except ValueError as e:
        raise _bad_request("Callback body is not valid JSON") from e
    if not isinstance(body, dict):
        raise _bad_request("Callback body must be a JSON object")
    return body


async def _read_form(request: Request, content_type: str) -> Dict[str, Any]:
    if content_type.startswith("application/x-www-form-urlencoded"):
        try:
            (await request.body()).decode("utf-8")
        except UnicodeDecodeError as e:
            raise _bad_request("Callback body is not valid UTF-8") from e
    try:
        form = await request.form()
    except (MultiPartException, ValueError) as e:
        raise _bad_request(f"Callback form could not be parsed: {e}") from e
    # uploaded files are not part of a PayLIVE notification
    return {key: value for key, value in form.multi_items() if isinstance(value, str)}


def build_callback_router(handler: CallbackHandler, path: str = "/paylive/callback") -> APIRouter:
    api = APIRouter()

    async def _dispatch(params: Dict[str, Any]) -> Dict[str, Any]:
        try:
            callback = normalize_callback(params)
        except IntegrationResponseError as e:
            logger.warning("Rejected PayLIVE callback: %s", e)
            raise HTTPException(
                status_code=400,
                detail={"message": str(e), "payload": e.payload},
            ) from e

        logger.info(
            "PayLIVE callback order_id=%s status=%s transaction_id=%s",
            callback.order_id, callback.status, callback.transaction_id,
        )
        if inspect.iscoroutinefunction(handler):
            await handler(callback)
        else:
            result = await run_in_threadpool(handler, callback)
            if inspect.isawaitable(result):
                await result

        return {
            "received": True,
            "order_id": callback.order_id,
            "status": callback.status,
            "transaction_id": callback.transaction_id,
        }

    @api.get(path, tags=["PayLIVE"])
    async def receive_callback(request: Request):
        return await _dispatch(dict(request.query_params))

    @api.post(path, tags=["PayLIVE"])
    async def receive_callback_post(request: Request):
        params: Dict[str, Any] = dict(request.query_params)
        content_type = request.headers.get("content-type", "").lower()

        if "application/json" in content_type:
            params.update(await _read_json(request))
        elif content_type.startswith(FORM_CONTENT_TYPES):
            params.update(await _read_form(request, content_type))
        elif await request.body():
            raise HTTPException(
                status_code=415,
                detail={"message": f"Unsupported callback content type: {content_type or 'none'}"},
            )

        return await _dispatch(params)

    return api
